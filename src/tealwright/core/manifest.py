import json
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from tealwright.core.errors import ManifestError

MANIFEST_FILENAME = "tealwright.toml"


@dataclass
class PathsConfig:
    """Workspace layout, relative to the project root."""

    workspace: str = "module"
    draft: str = "_BUILD-HERE/component-iterate.tsx"  # relative to workspace
    ready: str = "_COPY-THIS/component-ready.tsx"  # relative to workspace
    saved: str = "_SAVED"  # relative to workspace


@dataclass
class WatchConfig:
    """Hot-update configuration for the dev server."""

    file_pattern: str = "_BUILD-HERE/component-iterate.tsx"  # suffix match
    command: str | None = None  # None -> run our own build command
    coalesce: bool = False
    poll_interval: float = 0.5
    patterns: list[str] = field(default_factory=lambda: ["*.tsx", "*.ts", "*.jsx", "*.js"])


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 5173


@dataclass
class ProjectManifest:
    """Parsed ``tealwright.toml`` plus the project root it was resolved from."""

    root: Path
    name: str = "tealwright-project"
    paths: PathsConfig = field(default_factory=PathsConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @property
    def workspace_dir(self) -> Path:
        return self.root / self.paths.workspace

    @property
    def draft_path(self) -> Path:
        return self.workspace_dir / self.paths.draft

    @property
    def ready_path(self) -> Path:
        return self.workspace_dir / self.paths.ready

    @property
    def saved_dir(self) -> Path:
        return self.workspace_dir / self.paths.saved

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILENAME

    @property
    def build_command(self) -> str:
        """The shell command the dev server runs when the draft changes."""
        if self.watch.command:
            return self.watch.command
        return f'"{sys.executable}" -m tealwright build --manifest "{self.manifest_path}"'


def _expect(value: object, kind: type | tuple[type, ...], key: str) -> object:
    # bool is an int subclass; don't let `port = true` through
    if isinstance(value, bool) and kind is not bool:
        raise ManifestError(f"Invalid value for {key}: {value!r}")
    if not isinstance(value, kind):
        raise ManifestError(f"Invalid value for {key}: {value!r}")
    return value


def load_manifest(path: Path) -> ProjectManifest:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML in {path}: {e}") from e

    project = data.get("project", {})
    paths_data = data.get("paths", {})
    watch_data = data.get("watch", {})
    server_data = data.get("server", {})

    defaults = PathsConfig()
    paths_config = PathsConfig(
        workspace=str(_expect(paths_data.get("workspace", defaults.workspace), str, "paths.workspace")),
        draft=str(_expect(paths_data.get("draft", defaults.draft), str, "paths.draft")),
        ready=str(_expect(paths_data.get("ready", defaults.ready), str, "paths.ready")),
        saved=str(_expect(paths_data.get("saved", defaults.saved), str, "paths.saved")),
    )

    command = watch_data.get("command")
    if command is not None:
        _expect(command, str, "watch.command")

    watch_defaults = WatchConfig()
    watch_config = WatchConfig(
        file_pattern=str(
            _expect(
                watch_data.get("file_pattern", paths_config.draft),
                str,
                "watch.file_pattern",
            )
        ),
        command=command,
        coalesce=bool(_expect(watch_data.get("coalesce", False), bool, "watch.coalesce")),
        poll_interval=float(
            _expect(
                watch_data.get("poll_interval", watch_defaults.poll_interval),
                (int, float),
                "watch.poll_interval",
            )
        ),
        patterns=list(
            _expect(watch_data.get("patterns", watch_defaults.patterns), list, "watch.patterns")
        ),
    )
    if watch_config.poll_interval <= 0:
        raise ManifestError(f"Invalid value for watch.poll_interval: {watch_config.poll_interval!r}")
    for pattern in watch_config.patterns:
        _expect(pattern, str, "watch.patterns")

    server_config = ServerConfig(
        host=str(_expect(server_data.get("host", "127.0.0.1"), str, "server.host")),
        port=int(_expect(server_data.get("port", 5173), int, "server.port")),
    )

    return ProjectManifest(
        root=path.resolve().parent,
        name=str(_expect(project.get("name", "tealwright-project"), str, "project.name")),
        paths=paths_config,
        watch=watch_config,
        server=server_config,
    )


def resolve_manifest(path: Path) -> ProjectManifest:
    """Load *path* if it exists, else return defaults rooted at its directory."""
    if path.is_dir():
        path = path / MANIFEST_FILENAME
    if path.exists():
        return load_manifest(path)
    return ProjectManifest(root=path.resolve().parent)


def render_default_manifest(name: str) -> str:
    """Return the text of a fresh ``tealwright.toml``."""
    return f"""[project]
name = {json.dumps(name)}

[paths]
workspace = "module"
draft = "_BUILD-HERE/component-iterate.tsx"
ready = "_COPY-THIS/component-ready.tsx"
saved = "_SAVED"

[watch]
file_pattern = "_BUILD-HERE/component-iterate.tsx"
# command = "tealwright build"
coalesce = false
poll_interval = 0.5

[server]
host = "127.0.0.1"
port = 5173
"""
