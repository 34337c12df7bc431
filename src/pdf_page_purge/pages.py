"""Page selection and removal.

Pages are addressed by zero-based index at the time of inspection. Deleting
a page shifts every later index down by one, so removal always runs from
the highest index to the lowest.
"""

from __future__ import annotations

import logging
from typing import Iterable

from pdf_page_purge.document import DocumentHandle
from pdf_page_purge.errors import DeletionError, ExtractionError

logger = logging.getLogger(__name__)


def matches(page_text: str, phrase: str) -> bool:
    """Return True if ``phrase`` occurs in ``page_text``, ignoring case.

    The phrase is a literal substring; characters such as ``*`` or ``(``
    have no special meaning.
    """
    if not page_text or not phrase:
        return False
    return phrase.casefold() in page_text.casefold()


def select_pages_to_remove(document: DocumentHandle, phrase: str) -> list[int]:
    """Return the ascending indices of pages whose text contains ``phrase``.

    A page whose text cannot be extracted is logged and treated as not
    matching; it never aborts the scan of the rest of the document.
    """
    selected: list[int] = []
    for page_index in range(document.page_count):
        try:
            text = document.page_text(page_index)
        except ExtractionError as exc:
            logger.warning("Treating page as non-matching: %s", exc)
            continue
        if matches(text, phrase):
            selected.append(page_index)

    logger.debug(
        "%s: %d of %d pages match %r",
        document.path.name,
        len(selected),
        document.page_count,
        phrase,
    )
    return selected


def remove_pages(document: DocumentHandle, removal_set: Iterable[int]) -> None:
    """Delete exactly the pages in ``removal_set``.

    Every index is validated before anything is deleted, so a bad index
    leaves the document untouched.

    Raises:
        DeletionError: If an index is outside ``[0, page_count)``.
    """
    page_count = document.page_count
    indices = sorted(set(removal_set), reverse=True)

    out_of_range = [i for i in indices if not 0 <= i < page_count]
    if out_of_range:
        raise DeletionError(
            document.path,
            f"Page indices {sorted(out_of_range)} outside document of "
            f"{page_count} pages",
        )

    for page_index in indices:
        document.delete_page(page_index)
