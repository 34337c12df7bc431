"""PyMuPDF-backed access to PDF documents.

Wraps ``fitz.Document`` behind the small set of operations the purge
engine needs: counting pages, extracting page text, deleting pages, saving
and closing. Everything PyMuPDF-specific lives in this module.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Protocol

import fitz  # PyMuPDF

from pdf_page_purge.errors import DeletionError, ExtractionError, OpenError, SaveError

logger = logging.getLogger(__name__)

# Raw MuPDF errors (FzErrorBase) do not derive from RuntimeError.
_MUPDF_ERRORS = (RuntimeError, ValueError, fitz.mupdf.FzErrorBase)

# Extracts the full text of one page.
TextExtractor = Callable[[fitz.Page], str]


def extract_plain_text(page: fitz.Page) -> str:
    """Return all text runs on the page in reading order."""
    return page.get_text("text")


def extract_words_text(page: fitz.Page) -> str:
    """Return the page's words joined by single spaces.

    Word tuples are ``(x0, y0, x1, y1, word, block, line, word_no)``.
    Joining them drops the original line breaks, so a phrase split across
    two lines still matches.
    """
    return " ".join(word[4] for word in page.get_text("words"))


TEXT_EXTRACTORS: dict[str, TextExtractor] = {
    "text": extract_plain_text,
    "words": extract_words_text,
}


class DocumentHandle(Protocol):
    """Operations the purge engine performs on an opened document."""

    path: Path

    @property
    def page_count(self) -> int: ...

    def page_text(self, page_index: int) -> str: ...

    def delete_page(self, page_index: int) -> None: ...

    def can_save_in_place(self) -> bool: ...

    def save(self, destination: Path) -> None: ...

    def save_in_place(self) -> None: ...

    def close(self) -> None: ...


class PdfDocument:
    """An opened PDF file.

    Only one process step owns a ``PdfDocument`` at a time; it must be
    closed before the next file is opened. Usable as a context manager.
    """

    def __init__(
        self,
        doc: fitz.Document,
        path: Path,
        extractor: TextExtractor = extract_plain_text,
    ) -> None:
        self._doc = doc
        self._extractor = extractor
        self.path = Path(path)
        self.modified = False

    def __enter__(self) -> PdfDocument:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._doc.is_closed

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def page_text(self, page_index: int) -> str:
        """Extract the text of one page, or ``""`` if it has none.

        Raises:
            ExtractionError: If PyMuPDF fails to load or read the page.
        """
        try:
            page = self._doc.load_page(page_index)
            return self._extractor(page) or ""
        except (*_MUPDF_ERRORS, IndexError) as exc:
            raise ExtractionError(self.path, page_index, str(exc)) from exc

    def delete_page(self, page_index: int) -> None:
        """Delete one page.

        Raises:
            DeletionError: If PyMuPDF cannot remove the page.
        """
        try:
            self._doc.delete_page(page_index)
        except (*_MUPDF_ERRORS, IndexError) as exc:
            raise DeletionError(
                self.path, f"Cannot delete page {page_index + 1} ({exc})"
            ) from exc
        self.modified = True

    def can_save_in_place(self) -> bool:
        return self._doc.can_save_incrementally()

    def save(self, destination: Path) -> None:
        """Write the document to ``destination``, compacting unused objects."""
        try:
            self._doc.save(str(destination), garbage=3, deflate=True)
        except (*_MUPDF_ERRORS, OSError) as exc:
            raise SaveError(self.path, f"Could not save to {destination}: {exc}") from exc

    def save_in_place(self) -> None:
        """Append the changes to the open source file (incremental save)."""
        try:
            self._doc.save(
                str(self.path),
                incremental=True,
                encryption=fitz.PDF_ENCRYPT_KEEP,
            )
        except (*_MUPDF_ERRORS, OSError) as exc:
            raise SaveError(self.path, f"Incremental save failed: {exc}") from exc

    def close(self) -> None:
        if not self._doc.is_closed:
            self._doc.close()


def open_document(
    path: Path, extractor: TextExtractor = extract_plain_text
) -> PdfDocument:
    """Open ``path`` as a PDF.

    Raises:
        OpenError: If the file is missing, empty, corrupt, not a PDF, or
            password protected.
    """
    path = Path(path)
    if not path.is_file():
        raise OpenError(path, "PDF not found")

    try:
        doc = fitz.open(path)
    except (*_MUPDF_ERRORS, OSError) as exc:
        raise OpenError(path, f"Cannot open PDF ({exc})") from exc

    if not doc.is_pdf:
        doc.close()
        raise OpenError(path, "Not a PDF document")
    if doc.needs_pass:
        doc.close()
        raise OpenError(path, "PDF is password protected")

    return PdfDocument(doc, path, extractor)


@contextmanager
def pdf_engine(display_errors: bool = False) -> Iterator[None]:
    """Scope MuPDF's global state to one batch.

    MuPDF prints its own error chatter to stderr by default and keeps a
    process-wide warning buffer. Inside this block the chatter is muted and
    the buffer is collected; on exit both are restored, even on error.
    """
    previous = fitz.TOOLS.mupdf_display_errors()
    fitz.TOOLS.mupdf_display_errors(display_errors)
    fitz.TOOLS.reset_mupdf_warnings()
    logger.debug("PDF engine started (PyMuPDF %s)", fitz.VersionBind)
    try:
        yield
    finally:
        warnings = fitz.TOOLS.mupdf_warnings()
        if warnings:
            logger.debug("MuPDF warnings during batch:\n%s", warnings)
        fitz.TOOLS.mupdf_display_errors(previous)
        logger.debug("PDF engine stopped")
