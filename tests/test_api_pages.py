"""Tests for the static page endpoint."""

from pathlib import Path
from typing import Any

import pytest
from aiohttp import web
from slugserve.config import Config
from slugserve.server import create_app


@pytest.fixture
def app(test_config: Config) -> web.Application:
    return create_app(test_config)


class TestGetPage:
    """Tests for GET /{slug}.html."""

    @pytest.mark.asyncio
    async def test__existing_page__returns_exact_bytes(
        self,
        aiohttp_client: Any,
        app: web.Application,
        index_html: bytes,
    ) -> None:
        """Return 200 with the file bytes as text/html."""
        client = await aiohttp_client(app)
        response = await client.get("/index.html")

        assert response.status == 200
        assert response.headers["Content-Type"] == "text/html"
        assert await response.read() == index_html

    @pytest.mark.asyncio
    async def test__binary_content__returned_unchanged(
        self,
        aiohttp_client: Any,
        app: web.Application,
        content_dir: Path,
    ) -> None:
        """Serve bytes as-is without decoding."""
        content = b"\xff\xfe<p>\x00not utf-8\x80</p>"
        (content_dir / "raw.html").write_bytes(content)

        client = await aiohttp_client(app)
        response = await client.get("/raw.html")

        assert response.status == 200
        assert await response.read() == content

    @pytest.mark.asyncio
    async def test__missing_page__returns_404(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Return plain-text 404 for a page that doesn't exist."""
        client = await aiohttp_client(app)
        response = await client.get("/nonexistent.html")

        assert response.status == 404
        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert await response.text() == "Page not found"

    @pytest.mark.asyncio
    async def test__directory_named_like_page__returns_404(
        self,
        aiohttp_client: Any,
        app: web.Application,
        content_dir: Path,
    ) -> None:
        (content_dir / "folder.html").mkdir()

        client = await aiohttp_client(app)
        response = await client.get("/folder.html")

        assert response.status == 404
        assert await response.text() == "Page not found"

    @pytest.mark.asyncio
    async def test__repeated_requests__identical_responses(
        self,
        aiohttp_client: Any,
        app: web.Application,
        index_html: bytes,
    ) -> None:
        """Repeat requests without any change in the response."""
        client = await aiohttp_client(app)

        bodies = set()
        statuses = set()
        for _ in range(3):
            for path in ("/index.html", "/nonexistent.html"):
                response = await client.get(path)
                statuses.add((path, response.status))
                bodies.add((path, await response.read()))

        assert statuses == {("/index.html", 200), ("/nonexistent.html", 404)}
        assert bodies == {("/index.html", index_html), ("/nonexistent.html", b"Page not found")}

    @pytest.mark.asyncio
    async def test__response__includes_cache_headers(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        client = await aiohttp_client(app)
        response = await client.get("/index.html")

        assert response.headers["ETag"].startswith('"')
        assert response.headers["Cache-Control"] == "no-cache"

    @pytest.mark.asyncio
    async def test__matching_etag__returns_304(
        self,
        aiohttp_client: Any,
        app: web.Application,
    ) -> None:
        """Return 304 when ETag matches."""
        client = await aiohttp_client(app)
        response1 = await client.get("/index.html")
        etag = response1.headers["ETag"]

        response2 = await client.get("/index.html", headers={"If-None-Match": etag})

        assert response2.status == 304
        assert response2.headers["ETag"] == etag

    @pytest.mark.asyncio
    async def test__stale_etag__returns_200(
        self,
        aiohttp_client: Any,
        app: web.Application,
        index_html: bytes,
    ) -> None:
        client = await aiohttp_client(app)
        response = await client.get("/index.html", headers={"If-None-Match": '"stale"'})

        assert response.status == 200
        assert await response.read() == index_html

    @pytest.mark.asyncio
    async def test__nested_path__not_served(
        self,
        aiohttp_client: Any,
        app: web.Application,
        content_dir: Path,
    ) -> None:
        """Only serve pages directly under the content root."""
        (content_dir / "sub").mkdir()
        (content_dir / "sub" / "page.html").write_text("nested")

        client = await aiohttp_client(app)
        response = await client.get("/sub/page.html")

        assert response.status == 404
        assert await response.text() != "nested"


    @pytest.mark.asyncio
    async def test__page_request__logs_slug_and_path(
        self,
        aiohttp_client: Any,
        app: web.Application,
        content_dir: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Log the requested slug together with the resolved file."""
        client = await aiohttp_client(app)

        with caplog.at_level("INFO", logger="slugserve.api.pages"):
            await client.get("/index.html")

        assert "User requested index to display" in caplog.text
        assert str(content_dir.resolve() / "index.html") in caplog.text


class TestPathTraversal:
    """Pages outside the content root are never served."""

    @pytest.fixture
    def secret(self, content_dir: Path) -> bytes:
        content = b"root:x:0:0:secret"
        (content_dir.parent / "secret.html").write_bytes(content)
        return content

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        [
            "/../secret.html",
            "/..%2Fsecret.html",
            "/%2E%2E%2Fsecret.html",
            "/..%5Csecret.html",
            "/../../etc/passwd.html",
            "/%2Fetc%2Fpasswd.html",
        ],
    )
    async def test__traversal__never_leaks(
        self,
        aiohttp_client: Any,
        app: web.Application,
        secret: bytes,
        path: str,
    ) -> None:
        """Answer traversal attempts with 400 or 404 and no foreign content."""
        client = await aiohttp_client(app)
        response = await client.get(path)
        body = await response.read()

        assert response.status in (400, 404)
        assert body != secret
        assert b"root:" not in body

    @pytest.mark.asyncio
    async def test__symlink_out_of_root__returns_400(
        self,
        aiohttp_client: Any,
        app: web.Application,
        content_dir: Path,
        secret: bytes,
    ) -> None:
        """Reject a page that links to a file outside the root."""
        (content_dir / "leak.html").symlink_to(content_dir.parent / "secret.html")

        client = await aiohttp_client(app)
        response = await client.get("/leak.html")

        assert response.status == 400
        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert await response.text() == "Invalid page name"

    @pytest.mark.asyncio
    async def test__symlink_loop__returns_404(
        self,
        aiohttp_client: Any,
        app: web.Application,
        content_dir: Path,
    ) -> None:
        """Answer a page that links to itself with 404, never a server error."""
        (content_dir / "loop.html").symlink_to(content_dir / "loop.html")

        client = await aiohttp_client(app)
        response = await client.get("/loop.html")

        assert response.status == 404
        assert await response.text() == "Page not found"

    @pytest.mark.asyncio
    async def test__symlink_cycle__returns_404(
        self,
        aiohttp_client: Any,
        app: web.Application,
        content_dir: Path,
    ) -> None:
        (content_dir / "ping.html").symlink_to(content_dir / "pong.html")
        (content_dir / "pong.html").symlink_to(content_dir / "ping.html")

        client = await aiohttp_client(app)
        response = await client.get("/ping.html")

        assert response.status == 404

    @pytest.mark.asyncio
    async def test__hidden_file__returns_400(
        self,
        aiohttp_client: Any,
        app: web.Application,
        content_dir: Path,
    ) -> None:
        (content_dir / ".private.html").write_text("private")

        client = await aiohttp_client(app)
        response = await client.get("/.private.html")

        assert response.status == 400
        assert await response.text() == "Invalid page name"
