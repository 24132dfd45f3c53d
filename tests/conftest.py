"""Shared test fixtures."""

from pathlib import Path

import pytest
from slugserve.config import Config, ContentConfig, OAuthConfig, ServerConfig


@pytest.fixture
def index_html() -> bytes:
    return b"<!doctype html>\n<html><body><h1>Home</h1></body></html>\n"


@pytest.fixture
def content_dir(tmp_path: Path, index_html: bytes) -> Path:
    """Create a content root with an index page."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_bytes(index_html)
    return root


@pytest.fixture
def test_config(content_dir: Path) -> Config:
    """Create a test configuration serving content_dir."""
    return Config(
        server=ServerConfig(),
        content=ContentConfig(root_dir=content_dir),
        oauth=OAuthConfig(client_id="client-123", client_secret="s3cret"),
    )
