"""Output policy: what to do with a document once its pages are selected.

Three destination strategies are supported, safest first:

* ``OUTPUT_DIR`` writes results into a separate directory and never touches
  the source. Files with the same name from different sources overwrite
  each other there; the last one processed wins.
* ``REPLACE`` saves to a temporary file beside the source, closes the
  source, then atomically replaces it.
* ``OVERWRITE`` appends the changes to the open source file with an
  incremental save. A failure part-way through can damage the original.
"""

from __future__ import annotations

import enum
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pdf_page_purge.document import DocumentHandle
from pdf_page_purge.errors import SaveError

logger = logging.getLogger(__name__)


class Decision(enum.Enum):
    """What happens to a document given how many of its pages matched."""

    PASS_THROUGH = "pass-through"
    MODIFY = "modify"
    SKIP_ALL_MATCH = "skip-all-match"


class DestinationMode(enum.Enum):
    """How results are written; see the module docstring for each strategy."""

    OUTPUT_DIR = "output-dir"
    REPLACE = "replace"
    OVERWRITE = "overwrite"


@dataclass(frozen=True)
class Destination:
    """Where results go.

    Attributes:
        mode: The write strategy.
        output_dir: Target directory, required for ``OUTPUT_DIR``.
    """

    mode: DestinationMode
    output_dir: Path | None = None

    def __post_init__(self) -> None:
        if self.output_dir is not None:
            object.__setattr__(self, "output_dir", Path(self.output_dir))
        if self.mode is DestinationMode.OUTPUT_DIR and self.output_dir is None:
            raise ValueError("An output directory is required for output-dir mode.")
        if self.mode is not DestinationMode.OUTPUT_DIR and self.output_dir is not None:
            raise ValueError(f"{self.mode.value} mode does not take an output directory.")


def decide(page_count: int, removal_count: int) -> Decision:
    """Pick the action for a document.

    A document whose every page matched is never emptied; it is skipped.
    """
    if not 0 <= removal_count <= page_count:
        raise ValueError(
            f"removal_count {removal_count} outside 0..{page_count}"
        )
    if removal_count == 0:
        return Decision.PASS_THROUGH
    if removal_count == page_count:
        return Decision.SKIP_ALL_MATCH
    return Decision.MODIFY


def _same_file(a: Path, b: Path) -> bool:
    return a.resolve() == b.resolve()


def effective_mode(source: Path, destination: Destination) -> DestinationMode:
    """Return the strategy actually used for ``source``.

    An output directory that is the source's own directory means writing
    over the source, which is done with ``REPLACE``.
    """
    if destination.mode is DestinationMode.OUTPUT_DIR and _same_file(
        destination.output_dir, source.parent
    ):
        return DestinationMode.REPLACE
    return destination.mode


def resolve_destination(source: Path, destination: Destination) -> Path:
    """Return the path the result for ``source`` is written to."""
    if effective_mode(source, destination) is DestinationMode.OUTPUT_DIR:
        return destination.output_dir / source.name
    return source


def _ensure_output_dir(destination: Destination) -> None:
    if destination.output_dir is not None:
        destination.output_dir.mkdir(parents=True, exist_ok=True)


def pass_through(source: Path, destination: Destination) -> Path | None:
    """Place an unmodified document at its destination.

    Returns the copy's path, or None if the source already is the
    destination and nothing needed to happen.

    Raises:
        SaveError: If the copy fails.
    """
    target = resolve_destination(source, destination)
    if _same_file(target, source):
        return None

    try:
        _ensure_output_dir(destination)
        shutil.copy2(source, target)
    except OSError as exc:
        raise SaveError(source, f"Could not copy to {target}: {exc}") from exc
    logger.info("Copied unchanged: %s -> %s", source.name, target)
    return target


def write_modified(document: DocumentHandle, destination: Destination) -> Path:
    """Persist a modified document according to ``destination``.

    The document may be closed on return: the source is released before the
    finished file is swapped into place.

    Returns:
        The path that now holds the modified document.

    Raises:
        SaveError: If writing fails. The source is left intact except under
            ``OVERWRITE``.
    """
    source = document.path
    mode = effective_mode(source, destination)

    if mode is DestinationMode.OVERWRITE:
        if document.can_save_in_place():
            document.save_in_place()
            logger.info("Overwrote in place: %s", source)
            return source
        logger.warning(
            "%s cannot be saved incrementally; replacing via temporary file",
            source.name,
        )
        mode = DestinationMode.REPLACE

    if mode is DestinationMode.OUTPUT_DIR:
        target = resolve_destination(source, destination)
        try:
            _ensure_output_dir(destination)
        except OSError as exc:
            raise SaveError(source, f"Could not create {destination.output_dir}: {exc}") from exc
        _save_via_temp_file(document, target)
        logger.info("Saved: %s", target)
        return target

    _save_via_temp_file(document, source)
    logger.info("Replaced: %s", source)
    return source


def _save_via_temp_file(document: DocumentHandle, target: Path) -> None:
    """Save beside ``target``, release the source, then swap the new file in.

    ``target`` is only replaced after the new file is completely written, so
    a failed save never leaves a truncated file behind.
    """
    source = document.path
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.stem}-", suffix=".pdf.tmp", dir=target.parent
        )
    except OSError as exc:
        raise SaveError(source, f"Could not create temporary file: {exc}") from exc
    os.close(fd)
    tmp_path = Path(tmp_name)

    try:
        document.save(tmp_path)
        document.close()
        os.replace(tmp_path, target)
    except SaveError:
        tmp_path.unlink(missing_ok=True)
        raise
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise SaveError(source, f"Could not replace {target}: {exc}") from exc
