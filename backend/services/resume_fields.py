"""
Heuristic field parsers for resume text.

Every parser is a pure function over a section's text (or the whole document
when the section is missing). None of them raise on unexpected input: a
pattern that does not match yields an empty list or a default value.
"""
import re
from collections import Counter
from typing import Iterable, List, Optional, Sequence

from models.resume import (
    ParsedCertification,
    ParsedContact,
    ParsedEducation,
    ParsedExperience,
    ParsedProject,
    ParsedSkill,
)

DEFAULT_NAME = "Professional"

EMAIL_PATTERN = re.compile(r"[\w.-]+@[\w.-]+\.\w+")
PHONE_PATTERN = re.compile(r"\+?[\d \t\-().]{10,}")
LINKEDIN_PATTERN = re.compile(r"linkedin\.com/in/[\w-]+", re.IGNORECASE)
GITHUB_PATTERN = re.compile(r"github\.com/[\w-]+", re.IGNORECASE)
WEBSITE_PATTERN = re.compile(r"https?://[\w.-]+", re.IGNORECASE)
# "City Name, ST" or "City Name, Region Name" on one line
LOCATION_PATTERN = re.compile(
    r"\b[A-Z][a-zA-Z]+(?: [A-Z][a-zA-Z]+)*, ?(?:[A-Z]{2}\b|[A-Z][a-z]+(?: [A-Z][a-z]+)*)"
)
MIN_PHONE_DIGITS = 7

SENTENCE_SPLIT = re.compile(r"[.!?]+")
BULLET_LINE = re.compile(r"^[ \t]*(?:[•\-*]|\d+[.)])[ \t]*(.+)$", re.MULTILINE)
ACTION_VERBS = re.compile(
    r"\b(led|managed|developed|created|implemented|improved|increased|reduced|achieved)\b",
    re.IGNORECASE
)
MAX_HIGHLIGHTS = 6

TECHNICAL_SKILLS = [
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "Go", "Rust", "Swift",
    "React", "Vue", "Angular", "Node.js", "Express", "Django", "Flask", "Spring",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Git", "Linux", "SQL", "MongoDB",
    "PostgreSQL", "Redis", "GraphQL", "REST", "API", "Microservices", "DevOps",
    "CI/CD", "Terraform", "Jenkins", "GitHub", "Jira", "Agile", "Scrum",
]

SECURITY_SKILLS = [
    "NIST", "RMF", "STIG", "FISMA", "DISA", "DoD", "Security+", "CISSP", "CEH",
    "Penetration Testing", "Vulnerability Assessment", "Risk Management",
    "Compliance", "Cybersecurity", "Information Security", "Network Security",
]

KNOWN_CERTIFICATIONS = [
    "Security+", "CISSP", "CEH", "CISM", "CISA", "GSEC",
    "AWS Certified", "Azure Certified", "Google Cloud", "CompTIA",
    "Certified Ethical Hacker", "SANS", "GIAC",
]

ROLE_KEYWORDS = re.compile(
    r"\b(?:Engineer|Developer|Manager|Analyst|Specialist|Consultant|Director|Lead|Senior|Junior|Intern)",
    re.IGNORECASE
)
ORGANIZATION_KEYWORDS = re.compile(
    r"\b(?:Inc|Incorporated|LLC|Corp|Corporation|Company|University|Department|Agency)\b",
    re.IGNORECASE
)
# A line like this starts the next job entry
NEXT_ROLE = re.compile(r"^[A-Za-z][^|]*?(?:Engineer|Developer|Manager)", re.IGNORECASE)
DATE_PATTERN = re.compile(r"(\d{1,2}/\d{4}|\d{4}|[A-Z][a-z]+\s+\d{4})")

DEGREE_PATTERN = re.compile(
    r"\b((?:Bachelor|Master|PhD|Associate|Certificate)s?\b.*?\b(?:in|of)\s+\S.*)$",
    re.IGNORECASE
)
NEXT_DEGREE = re.compile(r"^(?:Bachelor|Master|PhD|Associate)", re.IGNORECASE)
INSTITUTION_KEYWORDS = re.compile(r"\b(?:University|College|Institute|School)", re.IGNORECASE)
YEAR_PATTERN = re.compile(r"\d{4}")
GPA_PATTERN = re.compile(r"\bGPA\b[:\s]*([0-4]\.\d{1,2})", re.IGNORECASE)
HONORS_PATTERN = re.compile(
    r"\b((?:summa |magna )?cum laude|with (?:high )?honors|dean'?s list)\b",
    re.IGNORECASE
)

MAX_PROJECT_TITLE_LENGTH = 100

STOP_WORDS = frozenset([
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had", "her", "was",
    "one", "our", "out", "day", "get", "has", "him", "his", "how", "man", "new", "now",
    "old", "see", "two", "way", "who", "boy", "did", "its", "let", "put", "say", "she",
    "too", "use",
])
KEYWORD_TOKEN = re.compile(r"\b\w{3,}\b")
MAX_KEYWORDS = 20


def _non_empty_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def _term_pattern(term: str, whole_word: bool = True) -> "re.Pattern[str]":
    # \b does not work next to symbols such as "C++" or "Security+"
    escaped = re.escape(term)
    if whole_word:
        escaped = rf"(?<!\w){escaped}(?!\w)"
    return re.compile(escaped, re.IGNORECASE)


def find_terms(text: str, vocabulary: Iterable[str], whole_word: bool = True) -> List[str]:
    """Vocabulary terms present in text, in vocabulary order."""
    return [term for term in vocabulary if _term_pattern(term, whole_word).search(text)]


def extract_bullets(text: str) -> List[str]:
    """Contents of bullet or numbered lines."""
    return [match.group(1).strip() for match in BULLET_LINE.finditer(text)]


def parse_contact(header_text: str) -> ParsedContact:
    """
    Contact details from the resume header.

    Args:
        header_text: Header section, or the full text when there is none

    Returns:
        ParsedContact; fields that are not found stay None
    """
    lines = _non_empty_lines(header_text)

    phone = None
    for match in PHONE_PATTERN.finditer(header_text):
        candidate = match.group(0)
        if sum(ch.isdigit() for ch in candidate) >= MIN_PHONE_DIGITS:
            phone = re.sub(r"\s+", " ", candidate).strip()
            break

    email = EMAIL_PATTERN.search(header_text)
    linkedin = LINKEDIN_PATTERN.search(header_text)
    github = GITHUB_PATTERN.search(header_text)
    website = WEBSITE_PATTERN.search(header_text)
    location = LOCATION_PATTERN.search(header_text)

    return ParsedContact(
        name=lines[0] if lines else DEFAULT_NAME,
        email=email.group(0) if email else None,
        phone=phone,
        location=location.group(0) if location else None,
        website=website.group(0) if website else None,
        linkedin=f"https://{linkedin.group(0)}" if linkedin else None,
        github=f"https://{github.group(0)}" if github else None
    )


def parse_summary(summary_text: str) -> str:
    """First three substantial sentences of the summary section."""
    if not summary_text:
        return ""

    sentences = [
        sentence.strip() for sentence in SENTENCE_SPLIT.split(summary_text)
        if len(sentence.strip()) > 20
    ]
    if not sentences:
        return ""
    return ". ".join(sentences[:3]) + "."


def parse_highlights(text: str) -> List[str]:
    """
    Up to six highlight lines.

    Bullet lines of 20-200 characters are preferred; without any, sentences
    of 30-150 characters containing an action verb are used.
    """
    highlights = [
        bullet for bullet in extract_bullets(text)
        if 20 < len(bullet) < 200
    ]

    if not highlights:
        for sentence in SENTENCE_SPLIT.split(text):
            sentence = sentence.strip()
            if 30 < len(sentence) < 150 and ACTION_VERBS.search(sentence):
                highlights.append(sentence)

    return highlights[:MAX_HIGHLIGHTS]


def parse_skills(skills_text: str) -> List[ParsedSkill]:
    """
    Skills from the fixed vocabularies.

    Returns:
        One record per vocabulary term found, technical terms first,
        security terms categorized as "certification"
    """
    skills = [
        ParsedSkill(name=term, category="technical")
        for term in find_terms(skills_text, TECHNICAL_SKILLS)
    ]
    skills.extend(
        ParsedSkill(name=term, category="certification")
        for term in find_terms(skills_text, SECURITY_SKILLS)
    )
    return skills


def _is_role_line(line: str) -> bool:
    return line[:1].isalpha() and bool(ROLE_KEYWORDS.search(line))


def _is_organization_line(line: str) -> bool:
    return line[:1].isalpha() and bool(ORGANIZATION_KEYWORDS.search(line))


def parse_experience(experience_text: str) -> List[ParsedExperience]:
    """
    Job entries: a title line, a company line, then content up to the next
    title line.

    Dates come from the content: the first is the start date, the second the
    end date; a missing end date (or one mentioning "present") marks the job
    as current.
    """
    experiences = []
    lines = _non_empty_lines(experience_text)
    index = 0

    while index < len(lines) - 1:
        title, company = lines[index], lines[index + 1]
        if not (_is_role_line(title) and _is_organization_line(company)):
            index += 1
            continue

        end = index + 2
        while end < len(lines) and not NEXT_ROLE.match(lines[end]):
            end += 1
        content = "\n".join(lines[index + 2:end])

        dates = DATE_PATTERN.findall(content)
        end_date = dates[1] if len(dates) > 1 else None

        experiences.append(ParsedExperience(
            title=title,
            company=company,
            start_date=dates[0] if dates else "",
            end_date=end_date or "Present",
            current=end_date is None or "present" in end_date.lower(),
            bullets=extract_bullets(content),
            keywords=extract_keywords(content)
        ))
        index = end

    return experiences


def parse_projects(projects_text: str) -> List[ParsedProject]:
    """
    Projects from a line walk.

    A short non-bullet line opens a project; bullet lines become its
    highlights and longer lines extend its description.
    """
    projects: List[ParsedProject] = []
    current: Optional[ParsedProject] = None

    def finish(project: ParsedProject) -> None:
        body = " ".join([project.title, project.description] + project.highlights)
        project.technologies = find_terms(body, TECHNICAL_SKILLS)
        github = GITHUB_PATTERN.search(body)
        if github:
            project.github = f"https://{github.group(0)}"
        website = WEBSITE_PATTERN.search(body)
        if website and "github.com" not in website.group(0).lower():
            project.url = website.group(0)
        projects.append(project)

    for line in _non_empty_lines(projects_text):
        is_bullet = line.startswith(("•", "-"))

        if len(line) < MAX_PROJECT_TITLE_LENGTH and not is_bullet:
            if current:
                finish(current)
            current = ParsedProject(title=line)
        elif current:
            if is_bullet:
                current.highlights.append(re.sub(r"^[•\-]\s*", "", line))
            else:
                current.description = f"{current.description} {line}".strip()

    if current:
        finish(current)

    return projects


def parse_education(education_text: str) -> List[ParsedEducation]:
    """
    Degree entries: a degree line ("<level> ... in/of <field>"), an
    institution line, then details up to the next degree line.

    The graduation date is the last four-digit year in the details.
    """
    education = []
    lines = _non_empty_lines(education_text)
    index = 0

    while index < len(lines) - 1:
        degree = DEGREE_PATTERN.search(lines[index])
        institution = lines[index + 1]
        if not degree or not INSTITUTION_KEYWORDS.search(institution):
            index += 1
            continue

        end = index + 2
        while end < len(lines) and not NEXT_DEGREE.match(lines[end]):
            end += 1
        details = "\n".join(lines[index + 2:end])

        years = YEAR_PATTERN.findall(details)
        gpa = GPA_PATTERN.search(details)

        education.append(ParsedEducation(
            degree=degree.group(1).strip(),
            institution=institution,
            graduation_date=years[-1] if years else "",
            gpa=gpa.group(1) if gpa else None,
            honors=[match.group(1) for match in HONORS_PATTERN.finditer(details)]
        ))
        index = end

    return education


def _certification_issuer(name: str) -> str:
    if "AWS" in name:
        return "Amazon"
    if "Azure" in name:
        return "Microsoft"
    return "Various"


def parse_certifications(certifications_text: str) -> List[ParsedCertification]:
    """Known certification names mentioned anywhere in the text."""
    return [
        ParsedCertification(name=name, issuer=_certification_issuer(name), date="")
        for name in find_terms(certifications_text, KNOWN_CERTIFICATIONS, whole_word=False)
    ]


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> List[str]:
    """
    Most frequent words of three or more characters, stop words excluded.

    Ties keep the order in which the words first appear.
    """
    words: Sequence[str] = KEYWORD_TOKEN.findall(text.lower())
    frequency = Counter(word for word in words if word not in STOP_WORDS)
    return [word for word, _ in frequency.most_common(limit)]
