"""Document data models."""
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePosixPath
from typing import Optional, Tuple

@dataclass
class PDFMetadata:
    """Document information dictionary, every field optional."""
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    creation_date: Optional[datetime] = None
    modification_date: Optional[datetime] = None
    keywords: Optional[str] = None

@dataclass(frozen=True)
class TextFragment:
    """One positioned run of text as emitted by the page content stream."""
    text: str
    font_size: float
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

@dataclass(frozen=True)
class PageInfo:
    """Extracted state of a single page."""
    page_number: int  # 1-indexed
    width: float
    height: float
    text_content: str
    text_items: Tuple[TextFragment, ...] = ()

    @property
    def word_count(self) -> int:
        return len(self.text_content.split())

@dataclass
class DocumentInfo:
    """Summary of a loaded PDF."""
    metadata: PDFMetadata
    num_pages: int
    fingerprint: str
    file_size: Optional[int] = None
    filename: Optional[str] = None

    @property
    def display_title(self) -> str:
        """Metadata title, falling back to the filename without extension."""
        if self.metadata.title and self.metadata.title.strip():
            return self.metadata.title.strip()
        if self.filename:
            return PurePosixPath(self.filename).stem
        return "Untitled document"
