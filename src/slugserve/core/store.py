"""Local-disk file store for static pages.

Path resolution and reads run in a worker thread so a slow disk never
blocks the event loop.
"""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from slugserve.core.pages import PageRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PageNotFoundError(FileNotFoundError):
    """Raised when a page is absent or cannot be read."""


class FileStore:
    """Byte-level reader for files under a content root."""

    def __init__(self, root_dir: Path, *, read_timeout: float = 5.0) -> None:
        """Initialize the store.

        Args:
            root_dir: Directory holding the HTML pages
            read_timeout: Seconds allowed for a single disk operation
        """
        self._root_dir = root_dir
        self._read_timeout = read_timeout

    @property
    def root_dir(self) -> Path:
        """Directory holding the HTML pages."""
        return self._root_dir

    @property
    def read_timeout(self) -> float:
        return self._read_timeout

    async def locate(self, page: PageRequest) -> Path:
        """Resolve a page to its canonical file under the content root.

        Args:
            page: Validated page request

        Returns:
            Canonical path to the page file

        Raises:
            MalformedSlugError: If the page resolves outside the content root
            PageNotFoundError: If the path cannot be resolved (symlink loops
                included) or resolution exceeded read_timeout
        """
        return await self._in_thread(page.resolve, self._root_dir, what=page.file_path)

    async def read(self, path: Path) -> bytes:
        """Read the full content of a file.

        Args:
            path: File to read

        Returns:
            Raw file bytes

        Raises:
            PageNotFoundError: If the file is missing, unreadable or the read
                did not finish within read_timeout
        """
        return await self._in_thread(path.read_bytes, what=str(path))

    async def _in_thread(self, func: Callable[..., T], *args: object, what: str) -> T:
        try:
            async with asyncio.timeout(self._read_timeout):
                return await asyncio.to_thread(func, *args)
        except TimeoutError as e:
            logger.warning(f"Timed out on {what} after {self._read_timeout}s")
            raise PageNotFoundError(f"Timed out reading: {what}") from e
        except (OSError, RuntimeError) as e:
            # RuntimeError is how Path.resolve() reports symlink loops before 3.13
            logger.debug(f"Cannot read {what}: {e}")
            raise PageNotFoundError(f"Page not readable: {what}") from e
