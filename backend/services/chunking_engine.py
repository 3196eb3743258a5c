"""Chunking engine that turns page text into fixed-size search windows."""
import logging
from typing import Callable, List, Optional, Sequence

from config import CHUNK_WORDS, CONTEXT_WORDS_AFTER, CONTEXT_WORDS_BEFORE
from models.chunk import Chunk
from models.document import PageInfo

logger = logging.getLogger(__name__)

class ChunkingEngine:
    """Segments page text into non-overlapping word windows with wider display context."""

    def __init__(
        self,
        chunk_words: int = CHUNK_WORDS,
        context_before: int = CONTEXT_WORDS_BEFORE,
        context_after: int = CONTEXT_WORDS_AFTER
    ):
        """
        Initialize ChunkingEngine.

        Args:
            chunk_words: Words per indexed chunk
            context_before: Words of context kept before each chunk
            context_after: Words of context kept after each chunk
        """
        if chunk_words <= 0:
            raise ValueError("chunk_words must be positive")

        self.chunk_words = chunk_words
        self.context_before = context_before
        self.context_after = context_after

    def build_index(
        self,
        pages: Sequence[Optional[PageInfo]],
        on_progress: Optional[Callable[[float], None]] = None
    ) -> List[Chunk]:
        """
        Chunk every page.

        Args:
            pages: Extracted pages in document order; None entries are skipped
            on_progress: Called after each page with the percentage completed

        Returns:
            Flat list of chunks across all pages
        """
        all_chunks = []
        total = len(pages)

        for position, page in enumerate(pages, start=1):
            if page is not None:
                all_chunks.extend(self.chunk_page(page))

            if on_progress:
                on_progress(position / total * 100)

        logger.info(f"Created {len(all_chunks)} chunks from {total} pages")
        return all_chunks

    def chunk_page(self, page: PageInfo) -> List[Chunk]:
        """
        Chunk a single page's text.

        Args:
            page: Extracted page

        Returns:
            Chunks with ids "{page}-{word_offset}"
        """
        words = page.text_content.split()
        chunks = []

        for offset in range(0, len(words), self.chunk_words):
            context_start = max(0, offset - self.context_before)
            context_end = offset + self.chunk_words + self.context_after

            chunks.append(Chunk(
                chunk_id=f"{page.page_number}-{offset}",
                page_number=page.page_number,
                word_offset=offset,
                text=" ".join(words[offset:offset + self.chunk_words]),
                context=" ".join(words[context_start:context_end])
            ))

        return chunks
