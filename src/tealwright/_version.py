"""Version lookup for tealwright."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

# Used when running from a source checkout that was never installed
FALLBACK_VERSION = "0.3.0"


def get_version() -> str:
    try:
        return _metadata_version("tealwright")
    except PackageNotFoundError:
        return FALLBACK_VERSION
