"""Table of contents data models."""
from dataclasses import dataclass
from typing import Optional

@dataclass
class TOCEntry:
    """Single navigational entry, either from the outline or inferred from layout."""
    title: str
    level: int  # 1 = top level
    page_number: int
    id: str
    font_size: Optional[float] = None
