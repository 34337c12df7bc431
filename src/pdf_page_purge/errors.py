"""Exceptions raised by the page purge engine."""

from __future__ import annotations

from pathlib import Path


class PagePurgeError(Exception):
    """Base class for all page purge failures tied to a single file."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = Path(path)


class OpenError(PagePurgeError):
    """The source file could not be opened as a PDF."""


class ExtractionError(PagePurgeError):
    """Text could not be extracted from one page."""

    def __init__(self, path: Path, page_index: int, message: str) -> None:
        super().__init__(path, f"{message} (page {page_index + 1})")
        self.page_index = page_index


class SaveError(PagePurgeError):
    """The modified document could not be written to its destination."""


class DeletionError(PagePurgeError):
    """A page could not be deleted.

    An out-of-range index signals a bug in the caller, not a problem with
    the file.
    """
