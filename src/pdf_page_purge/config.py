"""Run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pdf_page_purge.document import TEXT_EXTRACTORS
from pdf_page_purge.output import Destination, DestinationMode

# Marker text of the boilerplate pages this tool was written to remove.
DEFAULT_PHRASE = "information missing"
DEFAULT_EXTRACT_MODE = "text"


@dataclass(frozen=True)
class PurgeConfig:
    """Settings for one batch run.

    Attributes:
        input_dir: Directory holding the PDFs to process.
        phrase: Pages whose text contains this (ignoring case) are removed.
        mode: Destination strategy.
        output_dir: Target directory, required for output-dir mode only.
        extract_mode: Text extraction method, a key of ``TEXT_EXTRACTORS``.
        recursive: Also process PDFs in subdirectories of ``input_dir``.
        dry_run: Report what would be removed without writing anything.
    """

    input_dir: Path
    phrase: str = DEFAULT_PHRASE
    mode: DestinationMode = DestinationMode.OUTPUT_DIR
    output_dir: Path | None = None
    extract_mode: str = DEFAULT_EXTRACT_MODE
    recursive: bool = False
    dry_run: bool = False

    def __post_init__(self) -> None:
        if not self.phrase.strip():
            raise ValueError("The phrase must not be blank.")
        if self.extract_mode not in TEXT_EXTRACTORS:
            raise ValueError(
                f"Unknown extract mode {self.extract_mode!r}; "
                f"choose from {sorted(TEXT_EXTRACTORS)}"
            )
        # Destination rejects a missing or superfluous output directory.
        Destination(self.mode, self.output_dir)

    @property
    def destination(self) -> Destination:
        return Destination(self.mode, self.output_dir)
