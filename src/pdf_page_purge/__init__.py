"""PDF Page Purge: remove pages containing a phrase from batches of PDFs.

Usage::

    from pathlib import Path
    from pdf_page_purge import Destination, DestinationMode, find_pdf_files, run_batch

    files = find_pdf_files(Path("scans"))
    summary = run_batch(
        files,
        "information missing",
        Destination(DestinationMode.OUTPUT_DIR, Path("cleaned")),
    )
    print(f"{summary.modified_count} of {summary.processed_count} files modified")

Or from the command line::

    python -m pdf_page_purge scans/ --output-dir cleaned/
"""

from pdf_page_purge.batch import (
    BatchSummary,
    FileResult,
    Outcome,
    find_pdf_files,
    process_file,
    run_batch,
)
from pdf_page_purge.config import PurgeConfig
from pdf_page_purge.document import PdfDocument, open_document, pdf_engine
from pdf_page_purge.errors import (
    DeletionError,
    ExtractionError,
    OpenError,
    PagePurgeError,
    SaveError,
)
from pdf_page_purge.output import Decision, Destination, DestinationMode, decide
from pdf_page_purge.pages import matches, remove_pages, select_pages_to_remove

__all__ = [
    "BatchSummary",
    "Decision",
    "DeletionError",
    "Destination",
    "DestinationMode",
    "ExtractionError",
    "FileResult",
    "OpenError",
    "Outcome",
    "PagePurgeError",
    "PdfDocument",
    "PurgeConfig",
    "SaveError",
    "decide",
    "find_pdf_files",
    "matches",
    "open_document",
    "pdf_engine",
    "process_file",
    "remove_pages",
    "run_batch",
    "select_pages_to_remove",
]
