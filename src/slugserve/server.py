"""aiohttp server for slugserve.

Application factory and route registration.
"""

import asyncio
import logging

from aiohttp import web
from aiohttp.typedefs import Handler

from slugserve.api.oauth import create_oauth_routes
from slugserve.api.pages import create_pages_routes
from slugserve.app_keys import oauth_key, request_timeout_key, store_key
from slugserve.config import Config
from slugserve.core.store import FileStore

logger = logging.getLogger(__name__)

HOME_PAGE = "/index.html"


async def root_redirect(request: web.Request) -> web.Response:
    """Send the bare root to the home page."""
    logger.info(f"/ redirected to {HOME_PAGE}")
    return web.Response(
        status=301,
        headers={"Location": HOME_PAGE},
        text='Home page is <a href="index.html">here</a>.',
        content_type="text/html",
    )


async def not_found(request: web.Request) -> web.Response:
    """Answer every unrouted method and path with a plain 404."""
    logger.debug(f"No route for {request.method} {request.path}")
    return web.Response(status=404, text="Not found", content_type="text/plain")


@web.middleware
async def request_timeout_middleware(
    request: web.Request,
    handler: Handler,
) -> web.StreamResponse:
    """Bound every request by the configured timeout."""
    timeout = request.app[request_timeout_key]
    try:
        async with asyncio.timeout(timeout):
            return await handler(request)
    except TimeoutError:
        logger.error(f"{request.method} {request.path} timed out after {timeout}s")
        return web.Response(status=504, text="Request timed out", content_type="text/plain")


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application(middlewares=[request_timeout_middleware])

    app[store_key] = FileStore(
        config.content.root_dir,
        read_timeout=config.content.read_timeout,
    )
    app[oauth_key] = config.oauth
    app[request_timeout_key] = config.server.request_timeout

    app.router.add_get("/", root_redirect)
    app.router.add_routes(create_oauth_routes(config.oauth.callback_path))
    app.router.add_routes(create_pages_routes())

    # Fallback - must be last to catch everything else
    app.router.add_route("*", "/{path:.*}", not_found)

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(
        app,
        host=config.server.host,
        port=config.server.port,
        print=None,
    )
