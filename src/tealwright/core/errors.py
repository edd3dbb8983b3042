"""
Error types for the tealwright build pipeline.
"""

from __future__ import annotations


class TealwrightError(Exception):
    """Base exception for all tealwright errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ManifestError(TealwrightError):
    """
    Raised when ``tealwright.toml`` cannot be parsed or holds bad values.

    Examples:
    - Invalid TOML syntax
    - A string where a number is expected
    """

    pass


class DraftNotFoundError(TealwrightError):
    """Raised when the draft module file cannot be read. Fatal to the build."""

    def __init__(self, path: object):
        self.path = path
        super().__init__(f"Draft module not found: {path}")


class SnapshotError(TealwrightError):
    """
    Raised when a version snapshot cannot be committed or read.

    The ready artifact of the build that triggered it is unaffected.
    """

    pass


class InvalidModuleNameError(SnapshotError):
    """Raised when a module name cannot be used as a snapshot directory."""

    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(f"Invalid module name for versioning: {module_name!r}")
