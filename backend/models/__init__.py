"""Data models for the PDF document and resume pipeline."""
from .document import DocumentInfo, PageInfo, PDFMetadata, TextFragment
from .chunk import Chunk, SearchResult
from .toc import TOCEntry
from .resume import (
    ParsedCertification,
    ParsedContact,
    ParsedEducation,
    ParsedExperience,
    ParsedProject,
    ParsedResume,
    ParsedSkill,
)
from .api import DocumentResponse, LoadRequest, ProgressResponse, ResumeRequest

__all__ = [
    "DocumentInfo",
    "PageInfo",
    "PDFMetadata",
    "TextFragment",
    "Chunk",
    "SearchResult",
    "TOCEntry",
    "ParsedCertification",
    "ParsedContact",
    "ParsedEducation",
    "ParsedExperience",
    "ParsedProject",
    "ParsedResume",
    "ParsedSkill",
    "DocumentResponse",
    "LoadRequest",
    "ProgressResponse",
    "ResumeRequest",
]
