"""PDF decoding engine interface and its PyMuPDF binding."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import fitz  # PyMuPDF

from models.document import TextFragment

logger = logging.getLogger(__name__)


@dataclass
class OutlineNode:
    """Node of a document's native outline; page_number is None when the destination is unresolved."""
    title: str
    page_number: Optional[int]
    children: List["OutlineNode"] = field(default_factory=list)


class EnginePage(ABC):
    """A decoded page, as handed out by LoadedDocument.get_page()."""

    @property
    @abstractmethod
    def width(self) -> float:
        ...

    @property
    @abstractmethod
    def height(self) -> float:
        ...

    @abstractmethod
    def text_fragments(self) -> List[TextFragment]:
        """Text runs in content-stream order."""

    @abstractmethod
    def render_png(self, scale: float = 1.0) -> bytes:
        """Rasterize the page to PNG bytes."""


class EngineDocument(ABC):
    """An open document inside a decoding engine."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        ...

    @abstractmethod
    def metadata(self) -> Dict[str, str]:
        """Raw document information dictionary (keys as in the PDF Info dict)."""

    @abstractmethod
    def outline(self) -> List[OutlineNode]:
        """Top-level outline nodes, empty if the document has no outline."""

    @abstractmethod
    def load_page(self, page_number: int) -> EnginePage:
        """Load a page by its 1-based number."""

    @abstractmethod
    def close(self) -> None:
        ...


class PDFEngine(ABC):
    """Capability to decode PDF bytes into page, text and outline data."""

    @abstractmethod
    def open(self, data: bytes) -> EngineDocument:
        """
        Open a document from bytes.

        Raises:
            Exception: Any engine error if the bytes are not a readable PDF
        """


class PyMuPDFPage(EnginePage):
    """EnginePage backed by a fitz.Page."""

    def __init__(self, page: "fitz.Page"):
        self._page = page

    @property
    def width(self) -> float:
        return float(self._page.rect.width)

    @property
    def height(self) -> float:
        return float(self._page.rect.height)

    def text_fragments(self) -> List[TextFragment]:
        fragments = []

        # Get text with formatting info
        blocks = self._page.get_text("dict")["blocks"]

        for block in blocks:
            if "lines" not in block:
                continue

            for line in block["lines"]:
                for span in line["spans"]:
                    if not span["text"]:
                        continue
                    x0, y0, x1, y1 = span["bbox"]
                    fragments.append(TextFragment(
                        text=span["text"],
                        font_size=float(span["size"]),
                        x=float(x0),
                        y=float(y0),
                        width=float(x1 - x0),
                        height=float(y1 - y0)
                    ))

        return fragments

    def render_png(self, scale: float = 1.0) -> bytes:
        pixmap = self._page.get_pixmap(matrix=fitz.Matrix(scale, scale))
        return pixmap.tobytes("png")


class PyMuPDFDocument(EngineDocument):
    """EngineDocument backed by a fitz.Document."""

    def __init__(self, document: "fitz.Document"):
        self._document = document

    @property
    def page_count(self) -> int:
        return self._document.page_count

    def metadata(self) -> Dict[str, str]:
        raw = self._document.metadata or {}
        # PyMuPDF uses its own key names; map back to the Info dict names
        key_map = {
            "title": "Title",
            "author": "Author",
            "subject": "Subject",
            "creator": "Creator",
            "producer": "Producer",
            "keywords": "Keywords",
            "creationDate": "CreationDate",
            "modDate": "ModDate",
        }
        return {key_map[k]: v for k, v in raw.items() if k in key_map and v}

    def outline(self) -> List[OutlineNode]:
        # get_toc() is already flat in depth-first order: [level, title, page]
        roots: List[OutlineNode] = []
        stack: List[tuple] = []  # (level, node)

        for level, title, page in self._document.get_toc(simple=True):
            node = OutlineNode(
                title=title,
                page_number=page if page and page > 0 else None
            )
            while stack and stack[-1][0] >= level:
                stack.pop()
            if stack:
                stack[-1][1].children.append(node)
            else:
                roots.append(node)
            stack.append((level, node))

        return roots

    def load_page(self, page_number: int) -> EnginePage:
        return PyMuPDFPage(self._document.load_page(page_number - 1))

    def close(self) -> None:
        self._document.close()


class PyMuPDFEngine(PDFEngine):
    """Default decoding engine using PyMuPDF."""

    def open(self, data: bytes) -> EngineDocument:
        document = fitz.open(stream=data, filetype="pdf")
        if not document.is_pdf or document.page_count < 1:
            document.close()
            raise ValueError("Document has no PDF pages")
        logger.debug(f"Opened PDF with {document.page_count} pages")
        return PyMuPDFDocument(document)
