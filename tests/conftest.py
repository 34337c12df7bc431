"""Shared fixtures for the page purge tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import fitz  # PyMuPDF
import pytest

from pdf_page_purge.errors import ExtractionError


def _create_test_pdf(path: Path, pages: list[str]) -> Path:
    """Create a minimal PDF with the given text on each page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page(width=612, height=792)
        page.insert_text((72, 72), text, fontsize=12)
    doc.save(str(path))
    doc.close()
    return path


def read_page_texts(path: Path) -> list[str]:
    """Return the stripped text of each page of the PDF at ``path``."""
    with fitz.open(path) as doc:
        return [page.get_text().strip() for page in doc]


class FakeDocument:
    """In-memory stand-in for ``PdfDocument`` used to inject failures."""

    def __init__(
        self,
        texts: list[str],
        path: Path = Path("fake.pdf"),
        failing_pages: tuple[int, ...] = (),
    ) -> None:
        self.path = Path(path)
        self.texts = list(texts)
        self.failing_pages = set(failing_pages)
        self.deleted: list[int] = []
        self.closed = False

    @property
    def page_count(self) -> int:
        return len(self.texts)

    def page_text(self, page_index: int) -> str:
        if page_index in self.failing_pages:
            raise ExtractionError(self.path, page_index, "broken content stream")
        return self.texts[page_index]

    def delete_page(self, page_index: int) -> None:
        self.deleted.append(page_index)
        del self.texts[page_index]

    def can_save_in_place(self) -> bool:
        return False

    def save(self, destination: Path) -> None:
        Path(destination).write_text("\n".join(self.texts))

    def save_in_place(self) -> None:
        self.save(self.path)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing a text-per-page PDF under ``tmp_path``."""

    def factory(name: str, pages: list[str], directory: Path | None = None) -> Path:
        target_dir = directory or tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        return _create_test_pdf(target_dir / name, pages)

    return factory


@pytest.fixture
def fake_document() -> type[FakeDocument]:
    return FakeDocument


@pytest.fixture
def page_texts() -> Callable[[Path], list[str]]:
    return read_page_texts
