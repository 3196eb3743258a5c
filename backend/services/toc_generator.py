"""Table of contents generation from the outline or from layout heuristics."""
import logging
import re
from typing import List, Sequence

from config import DEFAULT_FONT_SIZE, HEADING_FONT_RATIO, TOC_PAGE_LIMIT
from models.document import TextFragment
from models.toc import TOCEntry
from services.pdf_document import LoadedDocument
from services.pdf_engine import OutlineNode

logger = logging.getLogger(__name__)

HEADING_KEYWORDS = re.compile(r"^(chapter|section|part|\d+\.|\d+\.\d+)", re.IGNORECASE)
MAX_HEADING_LENGTH = 100
MIN_HEADING_LENGTH = 3


def average_font_size(fragments: Sequence[TextFragment]) -> float:
    if not fragments:
        return DEFAULT_FONT_SIZE
    return sum(fragment.font_size for fragment in fragments) / len(fragments)


def heading_level(font_size: float, average: float) -> int:
    """Nesting level from the font size relative to the page average."""
    ratio = font_size / average if average else 1.0

    if ratio >= 1.8:
        return 1
    if ratio >= 1.4:
        return 2
    if ratio >= 1.2:
        return 3
    return 4


def is_heading_candidate(fragment: TextFragment, average: float) -> bool:
    text = fragment.text.strip()

    is_larger_font = fragment.font_size > average * HEADING_FONT_RATIO
    has_heading_keywords = bool(HEADING_KEYWORDS.match(text))
    is_short_text = len(text) < MAX_HEADING_LENGTH
    is_not_all_caps = text != text.upper()

    return (
        (is_larger_font or has_heading_keywords)
        and is_short_text
        and is_not_all_caps
        and len(text) > MIN_HEADING_LENGTH
    )


def headings_from_fragments(fragments: Sequence[TextFragment], page_number: int) -> List[TOCEntry]:
    """
    Pick heading-like fragments of a single page.

    Args:
        fragments: Page fragments in content-stream order
        page_number: Page the fragments belong to

    Returns:
        TOC entries in in-page order
    """
    headings = []
    average = average_font_size(fragments)

    for index, fragment in enumerate(fragments):
        if not is_heading_candidate(fragment, average):
            continue

        headings.append(TOCEntry(
            title=fragment.text.strip(),
            level=heading_level(fragment.font_size, average),
            page_number=page_number,
            font_size=fragment.font_size,
            id=f"heading-{page_number}-{index}"
        ))

    return headings


class TOCGenerator:
    """Builds a document's table of contents."""

    def __init__(self, document: LoadedDocument, page_limit: int = TOC_PAGE_LIMIT):
        """
        Initialize TOCGenerator.

        Args:
            document: Loaded document to analyse
            page_limit: Number of leading pages scanned by the heuristic pass
        """
        self.document = document
        self.page_limit = page_limit

    def generate(self) -> List[TOCEntry]:
        """
        Outline entries when the document has a usable outline, otherwise
        headings inferred from the first pages.
        """
        if self.document.is_destroyed:
            return []

        entries = self._from_outline()
        if entries:
            logger.info(f"Built TOC with {len(entries)} outline entries")
            return entries

        entries = self._from_layout()
        logger.info(f"Built TOC with {len(entries)} inferred headings")
        return entries

    def _from_outline(self) -> List[TOCEntry]:
        try:
            outline = self.document.engine_document.outline()
        except Exception as e:
            logger.error(f"Error extracting outline: {str(e)}")
            return []

        entries: List[TOCEntry] = []
        self._flatten(outline, 1, entries)
        return entries

    def _flatten(self, nodes: List[OutlineNode], level: int, entries: List[TOCEntry]) -> None:
        for node in nodes:
            page_number = node.page_number
            if page_number is not None and 1 <= page_number <= self.document.num_pages:
                entries.append(TOCEntry(
                    title=node.title,
                    level=level,
                    page_number=page_number,
                    id=f"toc-{len(entries)}"
                ))
            else:
                logger.debug(f"Skipping outline entry without page destination: {node.title!r}")

            if node.children:
                self._flatten(node.children, level + 1, entries)

    def _from_layout(self) -> List[TOCEntry]:
        entries: List[TOCEntry] = []

        for page_number in range(1, min(self.document.num_pages, self.page_limit) + 1):
            page_info = self.document.extract_page_text(page_number)
            if not page_info:
                continue
            entries.extend(headings_from_fragments(page_info.text_items, page_number))

        return entries
