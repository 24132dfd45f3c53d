"""Slug validation and page path resolution.

A slug names a single HTML file directly under the content root:
``index`` maps to ``<root>/index.html``. Slugs are untrusted input, so they
are checked against an allow-list and the resolved path must stay inside the
content root even after symlinks are followed.
"""

import re
from dataclasses import dataclass
from pathlib import Path

PAGE_SUFFIX = ".html"

_SLUG_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


class MalformedSlugError(ValueError):
    """Raised when a slug could escape the content root."""


@dataclass(frozen=True)
class PageRequest:
    """A request for one static page."""

    slug: str

    @classmethod
    def from_slug(cls, slug: str) -> "PageRequest":
        """Build a page request from an untrusted slug.

        Raises:
            MalformedSlugError: If the slug is empty, absolute, contains a
                path separator, a ``..`` sequence or characters outside
                the allow-list
        """
        validate_slug(slug)
        return cls(slug=slug)

    @property
    def file_path(self) -> str:
        """Path of the page relative to the content root."""
        return f"./{self.slug}{PAGE_SUFFIX}"

    def resolve(self, root_dir: Path) -> Path:
        """Resolve the page file under root_dir.

        Args:
            root_dir: Content root directory

        Returns:
            Canonical path to the page file

        Raises:
            MalformedSlugError: If the canonical path is outside root_dir
        """
        root = root_dir.resolve()
        candidate = (root / self.file_path).resolve()
        if not candidate.is_relative_to(root) or candidate == root:
            raise MalformedSlugError(f"Page path escapes content root: {self.slug!r}")
        return candidate


def validate_slug(slug: str) -> None:
    """Check a slug against the allow-list.

    Raises:
        MalformedSlugError: If the slug is not acceptable
    """
    if not slug:
        raise MalformedSlugError("Empty page name")
    if ".." in slug or not _SLUG_RE.fullmatch(slug):
        raise MalformedSlugError(f"Invalid page name: {slug!r}")
