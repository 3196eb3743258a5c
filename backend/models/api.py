"""API request and response models."""
from typing import Optional
from pydantic import BaseModel, Field


class LoadRequest(BaseModel):
    """Request body for loading a document by reference."""
    source: str = Field(..., description="http(s) URL or server-side path of the PDF")
    filename: Optional[str] = Field(None, description="Fallback title when metadata has none")


class ResumeRequest(BaseModel):
    """Request body for parsing a resume PDF."""
    source: str = Field(..., description="http(s) URL or server-side path of the resume PDF")
    filename: Optional[str] = None
    apply_overrides: bool = True


class ProgressResponse(BaseModel):
    """Indexing state of a document pipeline."""
    status: str
    progress: float
    error: Optional[str] = None


class DocumentResponse(BaseModel):
    """Summary of a loaded document."""
    fingerprint: str
    title: str
    num_pages: int
    file_size: Optional[int] = None
    filename: Optional[str] = None
    metadata: dict
    status: str
    progress: float
    chunks_indexed: int
    toc_entries: int
