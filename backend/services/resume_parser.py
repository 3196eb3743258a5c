"""Resume parser: document text to ParsedResume, plus override merging."""
import json
import logging
import re
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from models.resume import (
    RECORD_TYPES,
    ParsedContact,
    ParsedResume,
    ParsedSkill,
    required_fields,
)
from services import resume_fields
from services.document_loader import DocumentLoader, Source
from services.errors import ParseWarning
from services.resume_sections import segment_sections

logger = logging.getLogger(__name__)

# Shown when a resume cannot be parsed at all
DEFAULT_SUMMARY = "Experienced professional with a passion for excellence and innovation."
DEFAULT_HIGHLIGHTS = [
    "Proven track record of delivering high-quality results",
    "Strong analytical and problem-solving skills",
    "Excellent communication and collaboration abilities",
]
DEFAULT_SKILLS = ["Leadership", "Project Management", "Strategic Planning"]

# Sections whose absence makes the parser fall back to the full text
FALLBACK_SECTIONS = ["header", "skills", "experience", "projects", "education", "certifications"]


def name_from_filename(filename: str) -> str:
    """'jane_doe-resume.pdf' -> 'jane doe resume'."""
    name = re.sub(r"\.pdf$", "", Path(filename).name, flags=re.IGNORECASE)
    return re.sub(r"[-_]+", " ", name).strip() or resume_fields.DEFAULT_NAME


def default_resume(filename: Optional[str] = None) -> ParsedResume:
    """Placeholder resume used when parsing fails; the name comes from the filename."""
    name = name_from_filename(filename) if filename else resume_fields.DEFAULT_NAME
    return ParsedResume(
        contact=ParsedContact(name=name),
        summary=DEFAULT_SUMMARY,
        highlights=list(DEFAULT_HIGHLIGHTS),
        skills=[ParsedSkill(name=skill, category="soft") for skill in DEFAULT_SKILLS]
    )


def _skip(warnings: Optional[List[ParseWarning]], section: str, message: str, **details) -> None:
    logger.warning(f"Ignoring {section} override: {message}")
    if warnings is not None:
        warnings.append(ParseWarning(section=section, message=message, details=details))


def _contact_changes(value: Any, warnings: Optional[List[ParseWarning]]) -> Dict[str, Any]:
    if not isinstance(value, dict):
        _skip(warnings, "contact", "expected an object", value_type=type(value).__name__)
        return {}

    known = set(ParsedContact.__dataclass_fields__)
    changes = {}
    for key, field_value in value.items():
        if key not in known:
            continue
        # name is the only contact field that cannot be empty
        if isinstance(field_value, str) or (field_value is None and key != "name"):
            changes[key] = field_value
        else:
            _skip(warnings, "contact", f"{key} must be a string", field=key)
    return changes


def _record_items(key: str, value: Any, warnings: Optional[List[ParseWarning]]) -> Optional[List[Dict[str, Any]]]:
    """Override items that can be built into records, or None to keep the parsed list."""
    if not isinstance(value, list):
        _skip(warnings, key, "expected a list", value_type=type(value).__name__)
        return None

    required = required_fields(RECORD_TYPES[key])
    items = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            _skip(warnings, key, f"item {index} is not an object", index=index)
            continue
        missing = [name for name in required if name not in item]
        if missing:
            _skip(warnings, key, f"item {index} is missing {', '.join(missing)}", index=index, missing=missing)
            continue
        items.append(item)

    if value and not items:
        return None
    return items


def merge_overrides(
    resume: ParsedResume,
    overrides: Dict[str, Any],
    warnings: Optional[List[ParseWarning]] = None
) -> ParsedResume:
    """
    Shallow-merge an override record over a parsed resume.

    Contact fields merge one by one with the override winning; every other
    field present in the override replaces the parsed value wholesale (lists
    are never concatenated). Malformed values are skipped, each with a
    ParseWarning appended to warnings; a record list whose items are all
    malformed leaves the parsed list in place.

    Args:
        resume: Parsed resume
        overrides: JSON-compatible override record
        warnings: Receives a ParseWarning per skipped value

    Returns:
        New ParsedResume; the input is not modified
    """
    if not overrides:
        return resume

    changes: Dict[str, Any] = {}

    if overrides.get("contact") is not None:
        contact_changes = _contact_changes(overrides["contact"], warnings)
        if contact_changes:
            changes["contact"] = replace(resume.contact, **contact_changes)

    records: Dict[str, Any] = {}
    for key in RECORD_TYPES:
        if overrides.get(key) is not None:
            items = _record_items(key, overrides[key], warnings)
            if items is not None:
                records[key] = items
    rebuilt = ParsedResume.from_dict(records)
    for key in records:
        changes[key] = getattr(rebuilt, key)

    if overrides.get("summary") is not None:
        if isinstance(overrides["summary"], str):
            changes["summary"] = overrides["summary"]
        else:
            _skip(warnings, "summary", "expected a string")

    for key in ("highlights", "keywords"):
        value = overrides.get(key)
        if value is None:
            continue
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            changes[key] = list(value)
        else:
            _skip(warnings, key, "expected a list of strings")

    return replace(resume, **changes)


def load_overrides(path: Optional[str]) -> Dict[str, Any]:
    """
    Read the override record.

    Returns:
        Parsed JSON object, or {} when the file is missing, empty or invalid
    """
    if not path:
        return {}

    override_path = Path(path)
    if not override_path.is_file():
        logger.debug(f"No overrides found at {path}, using parsed content")
        return {}

    try:
        text = override_path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        overrides = json.loads(text)
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable overrides file {path}: {str(e)}")
        return {}

    if not isinstance(overrides, dict):
        logger.warning(f"Ignoring overrides file {path}: expected a JSON object")
        return {}

    return overrides


class ResumeParser:
    """Turns resume text (or a resume PDF) into a ParsedResume."""

    def __init__(self, loader: Optional[DocumentLoader] = None):
        """
        Initialize ResumeParser.

        Args:
            loader: DocumentLoader used by parse_source (a default one is created)
        """
        self.loader = loader or DocumentLoader()
        self.warnings: List[ParseWarning] = []

    def parse_text(self, text: str) -> ParsedResume:
        """
        Parse full resume text.

        Sections that are not found fall back to scanning the whole text;
        each fallback is recorded in self.warnings.
        """
        self.warnings = []
        sections = segment_sections(text)

        for section in FALLBACK_SECTIONS:
            if section not in sections:
                self.warnings.append(ParseWarning(
                    section=section,
                    message=f"No {section} section found, scanning full text"
                ))

        summary_text = sections.get("summary", "")

        resume = ParsedResume(
            contact=resume_fields.parse_contact(sections.get("header") or text),
            summary=resume_fields.parse_summary(summary_text),
            highlights=resume_fields.parse_highlights(summary_text or text),
            skills=resume_fields.parse_skills(sections.get("skills") or text),
            experience=resume_fields.parse_experience(sections.get("experience") or text),
            projects=resume_fields.parse_projects(sections.get("projects") or text),
            education=resume_fields.parse_education(sections.get("education") or text),
            certifications=resume_fields.parse_certifications(sections.get("certifications") or text),
            keywords=resume_fields.extract_keywords(text)
        )

        logger.info(
            f"Parsed resume: {len(resume.skills)} skills, {len(resume.experience)} jobs, "
            f"{len(resume.education)} degrees, {len(self.warnings)} warnings"
        )
        return resume

    def parse_source(self, source: Source, filename: Optional[str] = None) -> ParsedResume:
        """
        Load a resume PDF and parse its text.

        Raises:
            LoadError: If the document cannot be loaded
        """
        document = self.loader.load(source, filename=filename)
        try:
            text = document.extract_all_text()
        finally:
            document.destroy()
        return self.parse_text(text)

    def parse_or_default(self, source: Source, filename: Optional[str] = None) -> ParsedResume:
        """Like parse_source, but a load failure yields default_resume(filename)."""
        try:
            return self.parse_source(source, filename=filename)
        except Exception as e:
            logger.error(f"Error parsing resume {filename or source!r}: {str(e)}")
            self.warnings = [ParseWarning(
                section="document",
                message=f"Resume could not be loaded, using defaults: {str(e)}"
            )]
            fallback_name = filename or (source if isinstance(source, str) else None)
            return default_resume(fallback_name)
