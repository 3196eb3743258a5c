"""Retrieval engine for free-text search over the chunk index."""
import logging
from typing import List, Optional

from config import MAX_SEARCH_RESULTS
from models.chunk import SearchResult
from services.search_index import SearchIndex, tokenize

logger = logging.getLogger(__name__)


class RetrievalEngine:
    """Turn user queries into index lookups."""

    def __init__(self, search_index: Optional[SearchIndex] = None):
        """
        Initialize the retrieval engine.

        Args:
            search_index: Built index, or None while the document is still indexing
        """
        self.search_index = search_index
        logger.info("Initialized RetrievalEngine")

    def search(self, query: str, limit: int = MAX_SEARCH_RESULTS) -> List[SearchResult]:
        """
        Search indexed chunks.

        Args:
            query: Free-text query
            limit: Maximum number of results (capped at MAX_SEARCH_RESULTS)

        Returns:
            Ranked results, empty for blank queries, a missing index or lookup failures
        """
        # Handle empty query strings gracefully
        if not query or not query.strip():
            logger.debug("Empty query string provided, returning empty results")
            return []

        if self.search_index is None:
            logger.info("Search requested before the index was built")
            return []

        tokens = tokenize(query)
        if not tokens:
            return []

        try:
            results = self.search_index.search(tokens, limit=min(limit, MAX_SEARCH_RESULTS))
        except Exception as e:
            logger.error(f"Search error for query {query[:100]!r}: {str(e)}")
            return []

        logger.info(f"Query {query[:100]!r} matched {len(results)} chunks")
        return results
