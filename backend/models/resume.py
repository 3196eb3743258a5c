"""Resume data models."""
from dataclasses import MISSING, dataclass, field, asdict, fields
from typing import Any, Dict, List, Optional

@dataclass
class ParsedContact:
    """Contact block from the resume header."""
    name: str = "Professional"
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None

@dataclass
class ParsedSkill:
    name: str
    category: str  # technical | soft | language | certification
    level: Optional[str] = None  # beginner | intermediate | advanced | expert

@dataclass
class ParsedExperience:
    title: str
    company: str
    start_date: str
    end_date: str
    current: bool
    location: Optional[str] = None
    bullets: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)

@dataclass
class ParsedProject:
    title: str
    description: str = ""
    technologies: List[str] = field(default_factory=list)
    url: Optional[str] = None
    github: Optional[str] = None
    highlights: List[str] = field(default_factory=list)

@dataclass
class ParsedEducation:
    degree: str
    institution: str
    graduation_date: str
    location: Optional[str] = None
    gpa: Optional[str] = None
    honors: List[str] = field(default_factory=list)

@dataclass
class ParsedCertification:
    name: str
    issuer: str
    date: str = ""
    expiry_date: Optional[str] = None
    credential_id: Optional[str] = None
    url: Optional[str] = None

# Record types of the list-valued sections, used when rebuilding from JSON
RECORD_TYPES = {
    "skills": ParsedSkill,
    "experience": ParsedExperience,
    "projects": ParsedProject,
    "education": ParsedEducation,
    "certifications": ParsedCertification,
}

def required_fields(record_type) -> List[str]:
    """Fields a record cannot be built without."""
    return [
        f.name for f in fields(record_type)
        if f.default is MISSING and f.default_factory is MISSING
    ]

def _build(record_type, data: Dict[str, Any]):
    known = {f.name for f in fields(record_type)}
    return record_type(**{k: v for k, v in data.items() if k in known})

@dataclass
class ParsedResume:
    """Structured resume assembled from raw document text."""
    contact: ParsedContact = field(default_factory=ParsedContact)
    summary: str = ""
    highlights: List[str] = field(default_factory=list)
    skills: List[ParsedSkill] = field(default_factory=list)
    experience: List[ParsedExperience] = field(default_factory=list)
    projects: List[ParsedProject] = field(default_factory=list)
    education: List[ParsedEducation] = field(default_factory=list)
    certifications: List[ParsedCertification] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParsedResume":
        """
        Rebuild a resume from a JSON-compatible dict.

        Unknown keys are ignored; missing keys take the dataclass defaults.
        """
        kwargs: Dict[str, Any] = {}
        if "contact" in data and data["contact"] is not None:
            kwargs["contact"] = _build(ParsedContact, data["contact"])
        for key, record_type in RECORD_TYPES.items():
            if key in data and data[key] is not None:
                kwargs[key] = [
                    item if isinstance(item, record_type) else _build(record_type, item)
                    for item in data[key]
                ]
        for key in ("summary", "highlights", "keywords"):
            if key in data and data[key] is not None:
                kwargs[key] = data[key]
        return cls(**kwargs)
