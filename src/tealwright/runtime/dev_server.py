"""
Development server for iterating on a custom module.

Serves a preview shell with the current ready artifact, a WebSocket push
channel, and runs the hot-update orchestrator against file-watcher events.
"""

from __future__ import annotations

import asyncio
import html
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import HTMLResponse, PlainTextResponse

from tealwright.core.build import version_store_for
from tealwright.core.manifest import ProjectManifest
from tealwright.runtime.orchestrator import HotUpdateOptions, HotUpdateOrchestrator
from tealwright.runtime.session import DevSession
from tealwright.runtime.watcher import FileWatcher

logger = logging.getLogger(__name__)

WS_PATH = "/__tealwright__/ws"

# =============================================================================
# Preview Page
# =============================================================================

_CLIENT_SCRIPT = """
<script>
(function() {
  const overlay = document.getElementById('tw-error');
  function connect() {
    const proto = location.protocol === 'https:' ? 'wss' : 'ws';
    const socket = new WebSocket(proto + '://' + location.host + '%(ws_path)s');
    socket.onmessage = function(e) {
      const msg = JSON.parse(e.data);
      if (msg.type === 'full-reload') {
        location.reload();
      } else if (msg.type === 'error') {
        overlay.querySelector('h2').textContent = msg.err.message;
        overlay.querySelector('pre').textContent = msg.err.stack || '';
        overlay.querySelector('small').textContent = msg.err.plugin || '';
        overlay.hidden = false;
      }
    };
    socket.onclose = function() { setTimeout(connect, 1000); };
  }
  connect();
})();
</script>
"""

_PAGE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>%(title)s</title>
  <style>
    body { font-family: system-ui, sans-serif; background: #171717; color: #e5e5e5; margin: 0; padding: 1rem; }
    pre { background: #262626; padding: 1rem; overflow: auto; }
    #tw-error { position: fixed; inset: 0; background: rgba(60, 0, 0, 0.92); padding: 2rem; }
  </style>
</head>
<body>
  <h1>%(title)s</h1>
  <p>Ready artifact: <code>%(ready_path)s</code></p>
  <pre id="tw-ready">%(ready_text)s</pre>
  <div id="tw-error" hidden><h2></h2><pre></pre><small></small></div>
  %(script)s
</body>
</html>
"""


def render_preview_page(manifest: ProjectManifest) -> str:
    ready_path = manifest.ready_path
    if ready_path.exists():
        ready_text = ready_path.read_text(encoding="utf-8")
    else:
        ready_text = "No ready artifact yet. Save the draft to build it."
    return _PAGE % {
        "title": html.escape(manifest.name),
        "ready_path": html.escape(f"{manifest.paths.workspace}/{manifest.paths.ready}"),
        "ready_text": html.escape(ready_text),
        "script": _CLIENT_SCRIPT % {"ws_path": WS_PATH},
    }


# =============================================================================
# App Factory
# =============================================================================


def create_orchestrator(manifest: ProjectManifest) -> HotUpdateOrchestrator:
    return HotUpdateOrchestrator(
        HotUpdateOptions(
            file_pattern=manifest.watch.file_pattern,
            command=manifest.build_command,
            cwd=manifest.root,
            coalesce=manifest.watch.coalesce,
        )
    )


def create_dev_app(
    manifest: ProjectManifest,
    session: DevSession | None = None,
    orchestrator: HotUpdateOrchestrator | None = None,
    watch: bool = True,
) -> FastAPI:
    """
    Create the dev server application.

    Args:
        manifest: Project manifest (all paths resolve against its root)
        session: Optional session (creates new if not provided)
        orchestrator: Optional orchestrator (built from the manifest if not provided)
        watch: Start the file watcher in the app lifespan

    Returns:
        FastAPI application
    """
    session = session or DevSession()
    orchestrator = orchestrator or create_orchestrator(manifest)
    session.add_plugin(orchestrator)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        watcher: FileWatcher | None = None
        if watch:
            loop = asyncio.get_running_loop()
            watcher = FileWatcher(
                paths=[manifest.workspace_dir],
                on_change=lambda path: loop.call_soon_threadsafe(
                    session.dispatch, path.as_posix()
                ),
                patterns=manifest.watch.patterns,
                poll_interval=manifest.watch.poll_interval,
                exclude=[manifest.saved_dir],
            )
            watcher.start()
            logger.info(f"Watching {manifest.workspace_dir} for {manifest.watch.file_pattern}")
        try:
            yield
        finally:
            if watcher is not None:
                watcher.stop()
            await orchestrator.wait_idle()

    app = FastAPI(title=f"{manifest.name} (tealwright dev)", lifespan=lifespan)
    app.state.manifest = manifest
    app.state.session = session
    app.state.orchestrator = orchestrator

    @app.get("/", response_class=HTMLResponse)
    async def preview() -> str:
        return render_preview_page(manifest)

    @app.get("/__tealwright__/ready", response_class=PlainTextResponse)
    async def ready_artifact() -> PlainTextResponse:
        if not manifest.ready_path.exists():
            return PlainTextResponse("", status_code=404)
        return PlainTextResponse(manifest.ready_path.read_text(encoding="utf-8"))

    @app.get("/__tealwright__/versions")
    async def versions() -> dict[str, Any]:
        store = version_store_for(manifest)
        return {
            "modules": {name: store.list_versions(name) for name in store.list_modules()},
        }

    @app.websocket(WS_PATH)
    async def push_channel(websocket: WebSocket) -> None:
        connection_id = await session.channel.connect(websocket)
        try:
            while True:
                # Browsers don't send anything; this just detects disconnects
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            session.channel.disconnect(connection_id)

    return app


def run_dev_server(manifest: ProjectManifest, host: str | None = None, port: int | None = None) -> None:
    """Run the dev server until interrupted."""
    import uvicorn

    app = create_dev_app(manifest)
    host = host or manifest.server.host
    port = port or manifest.server.port

    logger.info(f"Development server for {manifest.name} at http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="warning")
