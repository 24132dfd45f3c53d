"""Static page endpoint.

Serves ``/{slug}.html`` from the content root as raw bytes.
"""

import logging
from hashlib import md5

from aiohttp import web

from slugserve.app_keys import store_key
from slugserve.core.pages import MalformedSlugError, PageRequest
from slugserve.core.store import PageNotFoundError

logger = logging.getLogger(__name__)


def create_pages_routes() -> list[web.RouteDef]:
    return [
        web.get("/{slug}.html", get_page),
    ]


async def get_page(request: web.Request) -> web.Response:
    slug = request.match_info["slug"]
    store = request.app[store_key]

    try:
        page = PageRequest.from_slug(slug)
        path = await store.locate(page)
    except MalformedSlugError as e:
        logger.warning(f"Rejected page request: {e}")
        return web.Response(status=400, text="Invalid page name", content_type="text/plain")
    except PageNotFoundError:
        return _page_not_found()

    logger.info(f"User requested {slug} to display; sending {path}")

    try:
        content = await store.read(path)
    except PageNotFoundError:
        return _page_not_found()

    etag = _compute_etag(content)
    headers = {"ETag": etag, "Cache-Control": "no-cache"}

    if request.headers.get("If-None-Match") == etag:
        return web.Response(status=304, headers=headers)

    return web.Response(body=content, content_type="text/html", headers=headers)


def _page_not_found() -> web.Response:
    return web.Response(status=404, text="Page not found", content_type="text/plain")


def _compute_etag(content: bytes) -> str:
    # 64 bits of the digest is plenty for cache validation
    content_hash = md5(content, usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
