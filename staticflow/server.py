"""
Development web server for built sites.

Serves files from the output directory with:
- Directory requests answered by their index.html
- Extension-less requests answered by <path>.html
- A fixed content-type table, defaulting to text/plain
- 404 for anything else, including paths outside the output directory

No caching headers, range requests or directory listings.
"""

import asyncio
from pathlib import Path
from typing import Optional

from aiohttp import web

from staticflow.builder import SiteBuilder
from staticflow.config import SiteConfig
from staticflow.logging import get_logger
from staticflow.watcher import SiteWatcher

log = get_logger('server')

CONTENT_TYPES = {
    'html': 'text/html',
    'css': 'text/css',
    'js': 'text/javascript',
    'png': 'image/png',
    'jpg': 'image/jpeg',
    'svg': 'image/svg+xml',
    'ico': 'image/x-icon',
    'json': 'application/json',
    'woff': 'font/woff',
    'woff2': 'font/woff2',
}
DEFAULT_CONTENT_TYPE = 'text/plain'
NOT_FOUND_BODY = '404 - Not found'

OUTPUT_DIR = web.AppKey('output_dir', Path)


def content_type_for(path: Path) -> str:
    return CONTENT_TYPES.get(path.suffix[1:], DEFAULT_CONTENT_TYPE)


def resolve_file(output_dir: Path, request_path: str) -> Optional[Path]:
    """Map a request path to a file in the output directory.

    Returns:
        The file to serve, or None when the request should get a 404
    """
    try:
        root = output_dir.resolve()
        file_path = (root / request_path.lstrip('/')).resolve()
    except (ValueError, RuntimeError):
        # Null bytes, symlink loops
        return None

    if file_path.is_dir():
        file_path = file_path / 'index.html'

    if not file_path.suffix:
        file_path = file_path.with_name(file_path.name + '.html')

    # Security: prevent path traversal
    if root not in file_path.parents:
        return None

    if file_path.is_file():
        return file_path
    return None


async def serve_file(request: web.Request) -> web.Response:
    """Serve a file from the output directory."""
    file_path = resolve_file(request.app[OUTPUT_DIR], request.path)
    if file_path is None:
        return web.Response(status=404, text=NOT_FOUND_BODY)

    try:
        body = file_path.read_bytes()
    except FileNotFoundError:
        return web.Response(status=404, text=NOT_FOUND_BODY)

    return web.Response(body=body, content_type=content_type_for(file_path))


def create_app(output_dir: Path) -> web.Application:
    """Create the web application."""
    app = web.Application()
    app[OUTPUT_DIR] = output_dir
    app.router.add_get('/', serve_file)
    app.router.add_get('/{path:.*}', serve_file)
    return app


def run_dev_server(config: SiteConfig, builder: SiteBuilder) -> None:
    """Serve the output directory and rebuild on changes until interrupted.

    aiohttp handles SIGINT: it closes the listener, then the cleanup hook
    stops the file watchers.
    """
    app = create_app(config.output_path)
    watcher = SiteWatcher(config, builder)

    async def start_watching(app: web.Application) -> None:
        watcher.start(asyncio.get_running_loop())
        log.info("Server running at http://localhost:%d", config.port)
        log.info("Waiting for changes... (Ctrl+C to quit)")

    async def stop_watching(app: web.Application) -> None:
        log.info("Shutting down server...")
        watcher.stop()

    app.on_startup.append(start_watching)
    app.on_cleanup.append(stop_watching)

    web.run_app(app, port=config.port, print=None)
