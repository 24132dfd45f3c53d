"""Core page lookup logic, independent of the HTTP layer."""

from slugserve.core.pages import MalformedSlugError, PageRequest
from slugserve.core.store import FileStore, PageNotFoundError

__all__ = ["FileStore", "MalformedSlugError", "PageNotFoundError", "PageRequest"]
