"""TF-IDF index over page chunks."""
import logging
import re
import threading
from typing import List, Optional, Sequence

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer

from models.chunk import Chunk, SearchResult

logger = logging.getLogger(__name__)

# Same tokens the vectorizer produces: lower-cased runs of word characters
TOKEN_PATTERN = r"(?u)\w+"
_TOKEN = re.compile(TOKEN_PATTERN)


def tokenize(text: str) -> List[str]:
    return _TOKEN.findall(text.lower())


def build_vectorizer() -> TfidfVectorizer:
    # Raw tf * idf weights; no length normalization so repeated terms rank higher
    return TfidfVectorizer(
        lowercase=True,
        token_pattern=TOKEN_PATTERN,
        norm=None,
        min_df=1
    )


class SearchIndex:
    """Store chunks and answer token queries with TF-IDF scores."""

    def __init__(self):
        """Initialize an empty index."""
        self._chunks: List[Chunk] = []
        self._vectorizer: Optional[TfidfVectorizer] = None
        self._matrix = None
        self._lock = threading.Lock()

    def add_chunks(self, chunks: Sequence[Chunk]) -> None:
        """
        Append chunks to the index and refit the vectorizer over all chunk texts.

        Args:
            chunks: Chunks to store

        Raises:
            ValueError: If chunks list is empty
        """
        if not chunks:
            raise ValueError("Chunks list cannot be empty")

        with self._lock:
            self._chunks.extend(chunks)
            vectorizer = build_vectorizer()
            try:
                matrix = vectorizer.fit_transform([chunk.text for chunk in self._chunks])
            except ValueError as e:
                # Raised when no chunk contains a single word token
                logger.warning(f"Nothing to index in {len(self._chunks)} chunks: {str(e)}")
                self._vectorizer, self._matrix = None, None
                return

            self._vectorizer = vectorizer
            self._matrix = matrix.tocsc()

        logger.debug(
            f"Indexed {len(chunks)} chunks ({len(vectorizer.vocabulary_)} distinct tokens)"
        )

    def search(self, tokens: Sequence[str], limit: int = 50) -> List[SearchResult]:
        """
        Find chunks containing every token.

        Args:
            tokens: Lower-cased query tokens
            limit: Maximum number of results

        Returns:
            Results by summed TF-IDF weight descending, ties in document
            order (page, offset)

        Raises:
            ValueError: If tokens is empty or limit is not positive
        """
        if not tokens:
            raise ValueError("Query tokens cannot be empty")

        if limit <= 0:
            raise ValueError("limit must be positive")

        with self._lock:
            vectorizer, matrix, chunks = self._vectorizer, self._matrix, list(self._chunks)

        if vectorizer is None:
            return []

        columns = []
        for token in dict.fromkeys(tokens):
            column = vectorizer.vocabulary_.get(token)
            if column is None:
                return []
            columns.append(column)

        weights = matrix[:, columns].toarray()
        matched = np.flatnonzero((weights > 0).all(axis=1))
        scores = weights.sum(axis=1)

        ranked = sorted(
            matched,
            key=lambda row: (-scores[row], chunks[row].page_number, chunks[row].word_offset)
        )

        return [
            SearchResult(
                chunk_id=chunks[row].chunk_id,
                page_number=chunks[row].page_number,
                text=chunks[row].text,
                context=chunks[row].context,
                score=float(scores[row])
            )
            for row in ranked[:limit]
        ]

    def clear(self) -> None:
        """Remove every chunk, used when a new document replaces the old one."""
        with self._lock:
            self._chunks.clear()
            self._vectorizer = None
            self._matrix = None
        logger.info("Cleared search index")

    def count(self) -> int:
        return len(self._chunks)
