"""Chunk data models."""
from dataclasses import dataclass

@dataclass
class Chunk:
    """Represents a fixed-size window of page text in the search index."""
    chunk_id: str  # Format: "{page}-{word_offset}"
    page_number: int
    word_offset: int
    text: str
    context: str  # wider window around the chunk for display

@dataclass
class SearchResult:
    """Chunk matched by a query, with its relevance score."""
    chunk_id: str
    page_number: int
    text: str
    context: str
    score: float
