"""Shared fixtures: a scriptable fake engine and real PDFs generated with PyMuPDF."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import fitz  # PyMuPDF
import pytest

from models.document import TextFragment
from services.document_loader import DocumentLoader
from services.pdf_engine import EngineDocument, EnginePage, OutlineNode, PDFEngine


class FakePage(EnginePage):
    """Page returning canned fragments."""

    def __init__(self, fragments, width=612.0, height=792.0, fail=False, on_render=None):
        self.fragments = list(fragments)
        self._width = width
        self._height = height
        self.fail = fail
        self.on_render = on_render
        self.fragment_calls = 0

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    def text_fragments(self):
        self.fragment_calls += 1
        if self.fail:
            raise RuntimeError("corrupt content stream")
        return list(self.fragments)

    def render_png(self, scale=1.0):
        if self.on_render:
            self.on_render()
        return b"\x89PNG-fake-" + str(scale).encode()


class FakeDocument(EngineDocument):
    """Document built from FakePage objects."""

    def __init__(self, pages, outline=None, metadata=None, metadata_error=False):
        self.pages = list(pages)
        self._outline = outline or []
        self._metadata = metadata or {}
        self.metadata_error = metadata_error
        self.closed = 0

    @property
    def page_count(self):
        return len(self.pages)

    def metadata(self):
        if self.metadata_error:
            raise RuntimeError("broken info dictionary")
        return dict(self._metadata)

    def outline(self):
        return self._outline

    def load_page(self, page_number):
        return self.pages[page_number - 1]

    def close(self):
        self.closed += 1


class FakeEngine(PDFEngine):
    """Engine that hands out a prepared FakeDocument, or raises."""

    def __init__(self, document=None, error=None):
        self.document = document
        self.error = error

    def open(self, data):
        if self.error:
            raise self.error
        return self.document


def fragments(*items):
    """fragments(("Title", 24), ("body", 11)) -> [TextFragment, ...]"""
    return [
        TextFragment(text=text, font_size=size, x=72.0, y=72.0 + 20 * i)
        for i, (text, size) in enumerate(items)
    ]


def text_page(text, size=11.0):
    return FakePage(fragments(*[(word, size) for word in text.split()]))


@pytest.fixture
def load_fake():
    """Load a FakeDocument through the real DocumentLoader."""
    def _load(fake_document, filename="fake.pdf"):
        loader = DocumentLoader(engine=FakeEngine(fake_document))
        return loader.load(b"%PDF-1.7 fake", filename=filename)
    return _load


def build_pdf(pages, toc=None, metadata=None) -> bytes:
    """
    Create a real PDF.

    Args:
        pages: One list of (text, font_size) lines per page
        toc: Optional outline in PyMuPDF set_toc() format
        metadata: Optional PyMuPDF metadata dict
    """
    document = fitz.open()
    for lines in pages:
        page = document.new_page()
        y = 72
        for text, size in lines:
            page.insert_text((72, y), text, fontsize=size)
            y += size * 2
    if toc:
        document.set_toc(toc)
    if metadata:
        document.set_metadata(metadata)
    data = document.tobytes()
    document.close()
    return data


@pytest.fixture
def sample_pdf() -> bytes:
    """Three-page PDF with an outline and metadata."""
    return build_pdf(
        pages=[
            [("Introduction", 24), ("This guide explains the deployment process.", 11)],
            [("Installation", 18), ("Install the package with the provided installer.", 11)],
            [("Troubleshooting", 18), ("Restart the service if the deployment fails.", 11)],
        ],
        toc=[[1, "Introduction", 1], [2, "Installation", 2], [2, "Troubleshooting", 3]],
        metadata={"title": "Deployment Guide", "author": "Ops Team"}
    )


@pytest.fixture
def plain_pdf() -> bytes:
    """Two-page PDF without an outline."""
    return build_pdf(
        pages=[
            [
                ("Getting Started", 26),
                ("first body line of text", 11),
                ("second body line of text", 11),
                ("third body line of text", 11),
            ],
            [("plain page without headings", 11)],
        ]
    )
