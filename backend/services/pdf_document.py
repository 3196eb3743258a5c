"""Loaded document handle with cached per-page text extraction."""
import logging
import re
import threading
from typing import Callable, Dict, List, Optional

from models.document import DocumentInfo, PageInfo
from services.errors import PageOutOfRange, RenderCancelled
from services.pdf_engine import EngineDocument, EnginePage

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

ProgressCallback = Callable[[float], None]


class LoadedDocument:
    """
    Handle to a parsed PDF.

    Owns the engine document and the per-page cache. After destroy() every
    accessor returns None or an empty value.
    """

    def __init__(self, engine_document: EngineDocument, info: DocumentInfo):
        """
        Initialize LoadedDocument.

        Args:
            engine_document: Open document from the decoding engine
            info: Metadata, page count and fingerprint computed by the loader
        """
        self._engine_document: Optional[EngineDocument] = engine_document
        self.info = info
        self._pages: Dict[int, PageInfo] = {}
        self._text_content = ""
        # The engine is not thread-safe; every call into it holds this lock.
        # Reentrant so a render callback may request another render.
        self._engine_lock = threading.RLock()
        self._render_lock = threading.Lock()
        self._render_generation: Dict[int, int] = {}

    @property
    def num_pages(self) -> int:
        return self.info.num_pages if self._engine_document is not None else 0

    @property
    def fingerprint(self) -> str:
        return self.info.fingerprint

    @property
    def metadata(self):
        return self.info.metadata

    @property
    def engine_document(self) -> Optional[EngineDocument]:
        return self._engine_document

    @property
    def is_destroyed(self) -> bool:
        return self._engine_document is None

    @property
    def text_content(self) -> str:
        """Full text from the last extract_all_text() run."""
        return self._text_content

    def _check_page(self, page_number: int) -> None:
        if self._engine_document is None:
            raise PageOutOfRange(page_number, "Document has been destroyed")
        valid = isinstance(page_number, int) and not isinstance(page_number, bool)
        if not valid or page_number < 1 or page_number > self.num_pages:
            raise PageOutOfRange(
                page_number, f"Page {page_number} outside [1, {self.num_pages}]"
            )

    def _context(self, page_number=None) -> dict:
        return {"fingerprint": self.info.fingerprint, "page_number": page_number}

    def get_page(self, page_number: int) -> Optional[EnginePage]:
        """Return the engine page, or None if out of range or on engine failure."""
        with self._engine_lock:
            try:
                self._check_page(page_number)
            except PageOutOfRange as e:
                logger.debug(str(e), extra=self._context())
                return None

            try:
                return self._engine_document.load_page(page_number)
            except Exception as e:
                logger.error(
                    f"Error loading page {page_number}: {str(e)}",
                    extra=self._context(page_number)
                )
                return None

    def extract_page_text(self, page_number: int) -> Optional[PageInfo]:
        """
        Extract text and layout fragments of one page.

        Results are memoized per page number; a failing page is not cached.
        The page number is validated before the cache is consulted.

        Args:
            page_number: 1-based page number

        Returns:
            PageInfo, or None if the page is out of range or extraction failed
        """
        with self._engine_lock:
            try:
                self._check_page(page_number)
            except PageOutOfRange as e:
                logger.debug(str(e), extra=self._context())
                return None

            if page_number in self._pages:
                return self._pages[page_number]

            page = self.get_page(page_number)
            if page is None:
                return None

            try:
                fragments = page.text_fragments()
                page_text = _WHITESPACE.sub(
                    " ", " ".join(fragment.text for fragment in fragments)
                ).strip()

                page_info = PageInfo(
                    page_number=page_number,
                    width=page.width,
                    height=page.height,
                    text_content=page_text,
                    text_items=tuple(fragments)
                )
            except Exception as e:
                logger.error(
                    f"Error extracting text from page {page_number}: {str(e)}",
                    extra=self._context(page_number)
                )
                return None

            self._pages[page_number] = page_info
            return page_info

    def extract_all_text(self, on_progress: Optional[ProgressCallback] = None) -> str:
        """
        Extract every page in order and join the page texts with a blank line.

        Args:
            on_progress: Called after each page with the percentage completed

        Returns:
            Full document text; pages that fail to extract are skipped
        """
        if self._engine_document is None:
            return ""

        text_parts: List[str] = []
        num_pages = self.num_pages

        for page_number in range(1, num_pages + 1):
            page_info = self.extract_page_text(page_number)
            if page_info:
                text_parts.append(page_info.text_content)

            if on_progress:
                on_progress(page_number / num_pages * 100)

        self._text_content = "\n\n".join(text_parts)
        logger.info(
            f"Extracted {len(text_parts)}/{num_pages} pages "
            f"({len(self._text_content)} characters)",
            extra={"fingerprint": self.info.fingerprint, "pages": num_pages}
        )
        return self._text_content

    def cached_pages(self) -> List[PageInfo]:
        """PageInfo already extracted, in page order."""
        return [self._pages[n] for n in sorted(self._pages)]

    def render_page(self, page_number: int, scale: float = 1.0) -> Optional[bytes]:
        """
        Render a page to PNG.

        A later request for the same page supersedes this one; the superseded
        call returns None.
        """
        with self._render_lock:
            generation = self._render_generation.get(page_number, 0) + 1
            self._render_generation[page_number] = generation

        try:
            with self._engine_lock:
                page = self.get_page(page_number)
                if page is None:
                    return None
                image = page.render_png(scale)

            with self._render_lock:
                if self._render_generation.get(page_number) != generation:
                    raise RenderCancelled(page_number, f"Render of page {page_number} superseded")
            return image
        except RenderCancelled as e:
            logger.debug(str(e), extra=self._context(page_number))
            return None
        except Exception as e:
            logger.error(
                f"Error rendering page {page_number}: {str(e)}",
                extra=self._context(page_number)
            )
            return None

    def destroy(self) -> None:
        """Release the engine document and all cached state. Safe to call repeatedly."""
        with self._engine_lock:
            if self._engine_document is not None:
                try:
                    self._engine_document.close()
                except Exception as e:
                    logger.warning(f"Error closing document: {str(e)}", extra=self._context())
                self._engine_document = None
                logger.info("Destroyed document", extra=self._context())
            self._pages.clear()
            self._text_content = ""
        with self._render_lock:
            self._render_generation.clear()
