"""Split resume text into named sections by heading lines."""
import re
from typing import Dict, List, Tuple

HEADER_SECTION = "header"

# Checked in order; the first pattern that matches a line wins
SECTION_HEADINGS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("summary", re.compile(r"^(summary|profile|about|overview|objective)", re.IGNORECASE)),
    ("experience", re.compile(r"^(experience|work|employment|career|professional)", re.IGNORECASE)),
    ("skills", re.compile(r"^(skills|technical|competencies|expertise)", re.IGNORECASE)),
    ("education", re.compile(r"^(education|academic|school|university)", re.IGNORECASE)),
    ("projects", re.compile(r"^(projects|portfolio|work samples)", re.IGNORECASE)),
    ("certifications", re.compile(r"^(certifications|certificates|licenses|credentials)", re.IGNORECASE)),
    ("achievements", re.compile(r"^(achievements|accomplishments|awards|honors)", re.IGNORECASE)),
]


def match_heading(line: str):
    """Section name whose heading pattern matches the line, or None."""
    for section_name, pattern in SECTION_HEADINGS:
        if pattern.match(line):
            return section_name
    return None


def _append(sections: Dict[str, str], name: str, lines: List[str]) -> None:
    # A heading seen again continues its section instead of replacing it
    block = "\n".join(lines)
    sections[name] = f"{sections[name]}\n{block}" if name in sections else block


def segment_sections(text: str) -> Dict[str, str]:
    """
    Split resume text into sections.

    Lines before the first heading belong to "header". Heading lines
    themselves are dropped; sections that never appear are absent. A
    repeated heading appends its lines to the earlier body.

    Args:
        text: Full document text

    Returns:
        Section name to newline-joined section body, in encounter order
    """
    sections: Dict[str, str] = {}
    lines = [line.strip() for line in text.split("\n")]

    current_section = HEADER_SECTION
    current_content: List[str] = []

    for line in lines:
        if not line:
            continue

        section_name = match_heading(line)
        if section_name is None:
            current_content.append(line)
            continue

        # Save previous section
        if current_content:
            _append(sections, current_section, current_content)

        current_section = section_name
        current_content = []

    # Save last section
    if current_content:
        _append(sections, current_section, current_content)

    return sections
