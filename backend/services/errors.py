"""Error taxonomy for document loading, page extraction and resume parsing."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class LoadErrorKind(str, Enum):
    """Why a document could not be loaded."""
    UNREADABLE = "unreadable"    # bytes are not a valid PDF structure
    UNAVAILABLE = "unavailable"  # byte source could not be retrieved


class LoadError(Exception):
    """Fatal failure to open a document."""

    def __init__(self, kind: LoadErrorKind, message: str, source: Optional[str] = None):
        self.kind = kind
        self.message = message
        self.source = source
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.kind.value.upper(),
            "message": self.message,
            "details": {"source": self.source} if self.source else {},
        }


class SourceNotAllowed(Exception):
    """Client-supplied source that the API refuses to read."""

    def __init__(self, message: str, source: str):
        self.message = message
        self.source = source
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": "FORBIDDEN",
            "message": self.message,
            "details": {"source": self.source},
        }


class ExtractionError(Exception):
    """Local failure while working with a single page."""

    def __init__(self, page_number: int, message: str):
        self.page_number = page_number
        super().__init__(message)


class PageOutOfRange(ExtractionError):
    """Requested page is outside [1, num_pages] or the document is gone."""


class RenderCancelled(ExtractionError):
    """A newer render request for the same page superseded this one."""


@dataclass
class ParseWarning:
    """Non-fatal note produced while parsing resume text."""
    section: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
