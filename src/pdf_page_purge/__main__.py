"""Entry point for ``python -m pdf_page_purge``.

Removes pages containing a phrase from every PDF in a directory and prints
a per-file status line plus a summary. Exit status is 0 when nothing needs
attention, 1 when some files were skipped or failed, and 2 when the batch
could not start.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pdf_page_purge.batch import BatchSummary, FileResult, Outcome, find_pdf_files, run_batch
from pdf_page_purge.config import DEFAULT_PHRASE, PurgeConfig
from pdf_page_purge.document import TEXT_EXTRACTORS
from pdf_page_purge.output import DestinationMode

EXIT_OK = 0
EXIT_ATTENTION = 1
EXIT_NOT_STARTED = 2

_STATUS_LABELS = {
    Outcome.SKIPPED_NO_MATCH: "unchanged",
    Outcome.SKIPPED_ALL_MATCH: "SKIPPED (all pages match)",
    Outcome.SKIPPED_OPEN_ERROR: "SKIPPED (cannot open)",
    Outcome.MODIFIED: "modified",
    Outcome.SAVE_ERROR: "FAILED (save error)",
    Outcome.PROCESSING_ERROR: "FAILED (processing error)",
    Outcome.WOULD_MODIFY: "would modify",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-page-purge",
        description="Remove pages containing a phrase from every PDF in a directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s scans/ -o cleaned/
  %(prog)s scans/ --phrase "DRAFT" --in-place replace
  %(prog)s scans/ --recursive --dry-run
        """,
    )
    parser.add_argument("input_dir", type=Path, help="Directory containing PDF files")
    parser.add_argument(
        "-p",
        "--phrase",
        default=DEFAULT_PHRASE,
        help=f"Text marking pages to remove, case-insensitive (default: {DEFAULT_PHRASE!r})",
    )

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        help="Write results here, leaving the originals untouched",
    )
    target.add_argument(
        "--in-place",
        choices=[DestinationMode.REPLACE.value, DestinationMode.OVERWRITE.value],
        help="Modify the originals: 'replace' writes a temporary file and swaps it in, "
        "'overwrite' saves incrementally into the open file",
    )

    parser.add_argument(
        "--extract-mode",
        choices=sorted(TEXT_EXTRACTORS),
        default="text",
        help="How page text is read: full text runs or space-joined words (default: text)",
    )
    parser.add_argument(
        "-r", "--recursive", action="store_true", help="Include PDFs in subdirectories"
    )
    parser.add_argument(
        "-n", "--dry-run", action="store_true", help="Report matches without writing files"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def _config_from_args(args: argparse.Namespace) -> PurgeConfig:
    if args.output_dir is not None:
        mode = DestinationMode.OUTPUT_DIR
    else:
        mode = DestinationMode(args.in_place)
    return PurgeConfig(
        input_dir=args.input_dir,
        phrase=args.phrase,
        mode=mode,
        output_dir=args.output_dir,
        extract_mode=args.extract_mode,
        recursive=args.recursive,
        dry_run=args.dry_run,
    )


def _format_result(result: FileResult) -> str:
    line = f"{result.source.name}: {_STATUS_LABELS[result.outcome]}"
    if result.removed_pages and result.outcome in (Outcome.MODIFIED, Outcome.WOULD_MODIFY):
        pages = ", ".join(str(i + 1) for i in result.removed_pages)
        line += f", removed {len(result.removed_pages)} of {result.page_count} pages ({pages})"
    if result.destination is not None:
        line += f" -> {result.destination}"
    if result.message:
        line += f" [{result.message}]"
    return line


def _print_summary(summary: BatchSummary, dry_run: bool) -> None:
    print()
    print(f"Files processed: {summary.processed_count}")
    if dry_run:
        would = summary.outcome_counts().get(Outcome.WOULD_MODIFY, 0)
        print(f"Files that would be modified: {would}")
    else:
        print(f"Files modified: {summary.modified_count}")
    if summary.attention_count:
        print(f"Files needing attention: {summary.attention_count}")


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the batch and return the exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = _config_from_args(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_NOT_STARTED

    if not config.input_dir.is_dir():
        print(f"Error: Input directory not found: {config.input_dir}", file=sys.stderr)
        return EXIT_NOT_STARTED

    files = find_pdf_files(
        config.input_dir, recursive=config.recursive, exclude=config.output_dir
    )
    if not files:
        print(f"No PDF files found in {config.input_dir}", file=sys.stderr)
        return EXIT_NOT_STARTED

    summary = run_batch(
        files,
        config.phrase,
        config.destination,
        extract_mode=config.extract_mode,
        dry_run=config.dry_run,
    )

    for result in summary.results:
        print(_format_result(result))
    _print_summary(summary, config.dry_run)

    return EXIT_ATTENTION if summary.attention_count else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
