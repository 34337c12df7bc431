"""Batch runner: apply the purge to every PDF in a set of files.

Files are processed strictly one after another. Each file is opened,
inspected, acted on and closed before the next one is opened, and a failure
on one file never stops the batch.
"""

from __future__ import annotations

import enum
import logging
from collections import Counter
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from pdf_page_purge.document import (
    TEXT_EXTRACTORS,
    DocumentHandle,
    TextExtractor,
    open_document,
    pdf_engine,
)
from pdf_page_purge.errors import OpenError, SaveError
from pdf_page_purge.output import (
    Decision,
    Destination,
    decide,
    pass_through,
    resolve_destination,
    write_modified,
)
from pdf_page_purge.pages import remove_pages, select_pages_to_remove

logger = logging.getLogger(__name__)

PDF_SUFFIX = ".pdf"

Opener = Callable[[Path, TextExtractor], DocumentHandle]


class Outcome(enum.Enum):
    """Per-file result recorded in the batch summary."""

    SKIPPED_NO_MATCH = "skipped-no-match"
    SKIPPED_ALL_MATCH = "skipped-all-match"
    SKIPPED_OPEN_ERROR = "skipped-open-error"
    MODIFIED = "modified-and-saved"
    SAVE_ERROR = "save-error"
    PROCESSING_ERROR = "processing-error"
    WOULD_MODIFY = "would-modify"

    @property
    def needs_attention(self) -> bool:
        return self in _ATTENTION_OUTCOMES


_ATTENTION_OUTCOMES = frozenset(
    {
        Outcome.SKIPPED_ALL_MATCH,
        Outcome.SKIPPED_OPEN_ERROR,
        Outcome.SAVE_ERROR,
        Outcome.PROCESSING_ERROR,
    }
)


@dataclass
class FileResult:
    """What happened to one input file.

    Attributes:
        source: The input file.
        outcome: The per-file outcome.
        page_count: Pages in the source, or 0 if it could not be opened.
        removed_pages: Zero-based indices selected for removal.
        destination: Where the result was written, if anything was written.
        message: Error or warning text for outcomes needing attention.
    """

    source: Path
    outcome: Outcome
    page_count: int = 0
    removed_pages: list[int] = field(default_factory=list)
    destination: Path | None = None
    message: str = ""


@dataclass
class BatchSummary:
    """Aggregate result of a batch run."""

    results: list[FileResult] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return len(self.results)

    @property
    def modified_count(self) -> int:
        return sum(1 for r in self.results if r.outcome is Outcome.MODIFIED)

    @property
    def attention_count(self) -> int:
        return sum(1 for r in self.results if r.outcome.needs_attention)

    def outcome_counts(self) -> dict[Outcome, int]:
        return dict(Counter(r.outcome for r in self.results))


def find_pdf_files(
    input_dir: Path, recursive: bool = False, exclude: Path | None = None
) -> list[Path]:
    """Return the PDF files in ``input_dir``, sorted by path.

    The ``.pdf`` suffix is matched case-insensitively. Files under
    ``exclude`` (typically the output directory) are left out so earlier
    results are not processed again. An ``exclude`` that contains
    ``input_dir`` itself is ignored.
    """
    input_dir = Path(input_dir)
    excluded = Path(exclude).resolve() if exclude is not None else None
    if excluded is not None and input_dir.resolve().is_relative_to(excluded):
        excluded = None
    candidates = input_dir.rglob("*") if recursive else input_dir.iterdir()
    return sorted(
        p
        for p in candidates
        if p.is_file()
        and p.suffix.lower() == PDF_SUFFIX
        and not (excluded is not None and p.resolve().is_relative_to(excluded))
    )


def process_file(
    document: DocumentHandle,
    phrase: str,
    destination: Destination,
    dry_run: bool = False,
) -> FileResult:
    """Select, remove and persist for one already-opened document.

    The caller owns ``document`` and must close it afterwards.

    Raises:
        DeletionError: If page selection produced an invalid index.
    """
    source = document.path
    page_count = document.page_count
    removal_set = select_pages_to_remove(document, phrase)
    decision = decide(page_count, len(removal_set))
    result = FileResult(
        source=source,
        outcome=Outcome.SKIPPED_NO_MATCH,
        page_count=page_count,
        removed_pages=removal_set,
    )

    if decision is Decision.SKIP_ALL_MATCH:
        result.outcome = Outcome.SKIPPED_ALL_MATCH
        result.message = f"all {page_count} pages match; left untouched"
        logger.warning("%s: %s", source.name, result.message)
        return result

    if dry_run:
        if decision is Decision.MODIFY:
            result.outcome = Outcome.WOULD_MODIFY
            result.destination = resolve_destination(source, destination)
        return result

    try:
        if decision is Decision.PASS_THROUGH:
            result.destination = pass_through(source, destination)
            return result

        remove_pages(document, removal_set)
        result.destination = write_modified(document, destination)
        result.outcome = Outcome.MODIFIED
    except SaveError as exc:
        logger.error("%s", exc)
        result.outcome = Outcome.SAVE_ERROR
        result.message = str(exc)
    return result


def run_batch(
    files: Iterable[Path],
    phrase: str,
    destination: Destination,
    *,
    extract_mode: str = "text",
    dry_run: bool = False,
    progress_callback: Callable[[int, int], None] | None = None,
    opener: Opener = open_document,
    engine: Callable[[], AbstractContextManager] = pdf_engine,
) -> BatchSummary:
    """Purge matching pages from every file in ``files``.

    The PDF engine is only started if there is at least one file, and is
    always shut down before returning.

    Args:
        files: Input PDF paths, processed in the given order.
        phrase: Literal text; pages containing it (ignoring case) are removed.
        destination: Where and how results are written.
        extract_mode: Key into ``TEXT_EXTRACTORS``.
        dry_run: Select pages and report, but write nothing.
        progress_callback: Optional callable invoked after each file with
            ``(current_file, total_files)`` (1-indexed).
        opener: Opens a path as a document; replaceable for testing.
        engine: Context manager scoping the PDF engine's global state.

    Returns:
        A ``BatchSummary`` with one ``FileResult`` per input file.

    Raises:
        ValueError: If ``phrase`` is blank or ``extract_mode`` is unknown.
    """
    if not phrase or not phrase.strip():
        raise ValueError("A non-blank phrase is required.")
    if extract_mode not in TEXT_EXTRACTORS:
        raise ValueError(f"Unknown extract mode: {extract_mode!r}")

    files = [Path(f) for f in files]
    summary = BatchSummary()
    if not files:
        logger.info("No PDF files to process")
        return summary

    extractor = TEXT_EXTRACTORS[extract_mode]
    total = len(files)
    logger.info("Processing %d PDF files (phrase %r)", total, phrase)

    with engine():
        for index, path in enumerate(files, start=1):
            logger.info("[%d/%d] %s", index, total, path.name)
            summary.results.append(
                _run_one(path, phrase, destination, extractor, dry_run, opener)
            )
            if progress_callback is not None:
                progress_callback(index, total)

    logger.info(
        "Done: %d processed, %d modified, %d need attention",
        summary.processed_count,
        summary.modified_count,
        summary.attention_count,
    )
    return summary


def _run_one(
    path: Path,
    phrase: str,
    destination: Destination,
    extractor: TextExtractor,
    dry_run: bool,
    opener: Opener,
) -> FileResult:
    try:
        document = opener(path, extractor)
    except OpenError as exc:
        logger.error("Skipping: %s", exc)
        return FileResult(
            source=path, outcome=Outcome.SKIPPED_OPEN_ERROR, message=str(exc)
        )

    try:
        return process_file(document, phrase, destination, dry_run)
    except Exception as exc:
        logger.exception("Failed to process %s", path)
        return FileResult(
            source=path,
            outcome=Outcome.PROCESSING_ERROR,
            message=f"{type(exc).__name__}: {exc}",
        )
    finally:
        document.close()
