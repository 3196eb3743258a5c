"""Document pipeline: load, extract and index, then answer queries."""
import logging
import threading
from typing import Callable, List, Optional

from models.chunk import SearchResult
from models.document import DocumentInfo, PageInfo
from models.toc import TOCEntry
from services.chunking_engine import ChunkingEngine
from services.document_loader import DocumentLoader, Source
from services.pdf_document import LoadedDocument
from services.retrieval_engine import RetrievalEngine
from services.search_index import SearchIndex
from services.toc_generator import TOCGenerator

logger = logging.getLogger(__name__)

ProgressListener = Callable[[float], None]


class PipelineStatus:
    IDLE = "idle"
    LOADING = "loading"
    INDEXING = "indexing"
    READY = "ready"
    ERROR = "error"


class DocumentPipeline:
    """
    One document-loading session.

    Usage: load(), then observe progress (listeners or the progress
    property), then query with search(), toc, get_page_info().
    """

    def __init__(
        self,
        loader: Optional[DocumentLoader] = None,
        chunking_engine: Optional[ChunkingEngine] = None
    ):
        """
        Initialize DocumentPipeline.

        Args:
            loader: DocumentLoader (default uses PyMuPDF)
            chunking_engine: ChunkingEngine (default 50-word windows)
        """
        self.loader = loader or DocumentLoader()
        self.chunking_engine = chunking_engine or ChunkingEngine()

        self.document: Optional[LoadedDocument] = None
        self.search_index = SearchIndex()
        self.retrieval_engine = RetrievalEngine()
        self.toc: List[TOCEntry] = []
        self.status = PipelineStatus.IDLE
        self.error: Optional[str] = None

        self._progress = 0.0
        self._listeners: List[ProgressListener] = []
        self._lock = threading.Lock()

    @property
    def info(self) -> Optional[DocumentInfo]:
        return self.document.info if self.document else None

    @property
    def progress(self) -> float:
        return self._progress

    def add_progress_listener(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def remove_progress_listener(self, listener: ProgressListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _report_progress(self, value: float) -> None:
        # Listeners never see progress go backwards
        with self._lock:
            if value < self._progress:
                return
            self._progress = value

        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logger.warning(f"Progress listener failed: {str(e)}")

    def load(self, source: Source, filename: Optional[str] = None) -> DocumentInfo:
        """
        Load a document and build its text, index and table of contents.

        Any previously loaded document is destroyed first.

        Raises:
            LoadError: If the document cannot be loaded
        """
        self.reset()
        self.status = PipelineStatus.LOADING

        try:
            self.document = self.loader.load(source, filename=filename)
        except Exception as e:
            self.status = PipelineStatus.ERROR
            self.error = str(e)
            raise

        self.status = PipelineStatus.INDEXING
        self.build()
        return self.document.info

    def build(self) -> None:
        """
        Extract every page, index it and generate the TOC.

        Extraction drives progress; indexing reuses the cached pages.
        """
        document = self.document
        if document is None:
            return

        document.extract_all_text(on_progress=self._report_progress)

        pages = [document.extract_page_text(n) for n in range(1, document.num_pages + 1)]
        chunks = self.chunking_engine.build_index(pages)

        self.search_index.clear()
        if chunks:
            self.search_index.add_chunks(chunks)
        self.retrieval_engine = RetrievalEngine(self.search_index)

        self.toc = TOCGenerator(document).generate()

        if self._progress < 100.0:
            self._report_progress(100.0)
        self.status = PipelineStatus.READY
        logger.info(
            f"Document ready with {len(self.toc)} TOC entries",
            extra={
                "fingerprint": document.fingerprint,
                "pages": document.num_pages,
                "chunks": self.search_index.count(),
                "status": self.status
            }
        )

    @property
    def text_content(self) -> str:
        return self.document.text_content if self.document else ""

    def get_page_info(self, page_number: int) -> Optional[PageInfo]:
        if self.document is None:
            return None
        return self.document.extract_page_text(page_number)

    def render_page(self, page_number: int, scale: float = 1.0) -> Optional[bytes]:
        if self.document is None:
            return None
        return self.document.render_page(page_number, scale)

    def search(self, query: str) -> List[SearchResult]:
        if self.status != PipelineStatus.READY:
            return []
        return self.retrieval_engine.search(query)

    def reset(self) -> None:
        """Destroy the current document and discard all derived state."""
        if self.document is not None:
            self.document.destroy()
        self.document = None
        self.search_index.clear()
        self.retrieval_engine = RetrievalEngine()
        self.toc = []
        self.status = PipelineStatus.IDLE
        self.error = None
        with self._lock:
            self._progress = 0.0
