"""Unit tests for the resume field parsers."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from models.resume import ParsedSkill
from services.resume_fields import (
    extract_bullets,
    extract_keywords,
    find_terms,
    parse_certifications,
    parse_contact,
    parse_education,
    parse_experience,
    parse_highlights,
    parse_projects,
    parse_skills,
    parse_summary,
)


class TestParseContact:
    """Test suite for parse_contact."""

    def test_full_header(self):
        header = (
            "Jane Smith\n"
            "jane.smith@example.com | (555) 123-4567\n"
            "Austin, TX\n"
            "linkedin.com/in/janesmith\n"
            "github.com/jsmith\n"
            "https://janesmith.dev"
        )

        contact = parse_contact(header)

        assert contact.name == "Jane Smith"
        assert contact.email == "jane.smith@example.com"
        assert contact.phone == "(555) 123-4567"
        assert contact.location == "Austin, TX"
        assert contact.linkedin == "https://linkedin.com/in/janesmith"
        assert contact.github == "https://github.com/jsmith"
        assert contact.website == "https://janesmith.dev"

    def test_empty_header_uses_default_name(self):
        contact = parse_contact("")

        assert contact.name == "Professional"
        assert contact.email is None
        assert contact.phone is None

    def test_short_digit_runs_are_not_phones(self):
        contact = parse_contact("Sam Lee\nExt. 12 - 34 - 5")

        assert contact.phone is None


class TestParseSummaryAndHighlights:

    def test_summary_keeps_three_substantial_sentences(self):
        text = (
            "Seasoned engineer with ten years of experience. Loves cats. "
            "Builds reliable distributed systems! Mentors junior developers across teams? "
            "Extra sentence that should be dropped."
        )

        assert parse_summary(text) == (
            "Seasoned engineer with ten years of experience. "
            "Builds reliable distributed systems. "
            "Mentors junior developers across teams."
        )

    def test_summary_empty(self):
        assert parse_summary("") == ""
        assert parse_summary("Too short. Also short.") == ""

    def test_highlights_prefer_bullets(self):
        text = (
            "- Led a team of five engineers to ship v2\n"
            "- Short one\n"
            "• Reduced cloud spend by forty percent across regions"
        )

        assert parse_highlights(text) == [
            "Led a team of five engineers to ship v2",
            "Reduced cloud spend by forty percent across regions",
        ]

    def test_highlights_fall_back_to_action_sentences(self):
        text = (
            "I led the migration of twelve services to Kubernetes. I like tea. "
            "We implemented a new billing pipeline in two months."
        )

        assert parse_highlights(text) == [
            "I led the migration of twelve services to Kubernetes",
            "We implemented a new billing pipeline in two months",
        ]

    def test_highlights_capped_at_six(self):
        text = "\n".join(f"- Delivered milestone number {n} on schedule" for n in range(8))

        assert len(parse_highlights(text)) == 6

    def test_extract_bullets_numbered(self):
        assert extract_bullets("1. First item\n2) Second item\n2023 was a year") == [
            "First item",
            "Second item",
        ]


class TestParseSkills:
    """Test suite for vocabulary skill matching."""

    def test_technical_and_security_terms(self):
        assert parse_skills("AWS and STIG experience") == [
            ParsedSkill(name="AWS", category="technical"),
            ParsedSkill(name="STIG", category="certification"),
        ]

    def test_symbol_terms_match_whole_words(self):
        names = [skill.name for skill in parse_skills("Proficient in C++ and C# and Go")]

        assert names == ["C++", "C#", "Go"]

    def test_terms_inside_other_words_do_not_match(self):
        names = [skill.name for skill in parse_skills("Going forward with Django")]

        assert names == ["Django"]

    def test_case_insensitive(self):
        assert find_terms("python and KUBERNETES", ["Python", "Kubernetes", "Rust"]) == [
            "Python",
            "Kubernetes",
        ]

    def test_no_skills(self):
        assert parse_skills("") == []


class TestParseExperience:
    """Test suite for parse_experience."""

    def test_single_current_job(self):
        experience = parse_experience("Senior Engineer\nAcme Inc\n01/2020 - Present\n- Built things")

        assert len(experience) == 1
        job = experience[0]
        assert job.title == "Senior Engineer"
        assert job.company == "Acme Inc"
        assert job.start_date == "01/2020"
        assert job.end_date == "Present"
        assert job.current is True
        assert job.bullets == ["Built things"]

    def test_multiple_jobs(self):
        text = (
            "Senior Software Engineer\n"
            "Globex Corporation\n"
            "March 2019 - Present\n"
            "- Led platform migration\n"
            "Software Developer\n"
            "Initech LLC\n"
            "06/2015 - 02/2019\n"
            "- Wrote reports"
        )

        experience = parse_experience(text)

        assert [(job.title, job.company) for job in experience] == [
            ("Senior Software Engineer", "Globex Corporation"),
            ("Software Developer", "Initech LLC"),
        ]
        assert experience[0].start_date == "March 2019"
        assert experience[0].current is True
        assert experience[1].start_date == "06/2015"
        assert experience[1].end_date == "02/2019"
        assert experience[1].current is False
        assert experience[1].bullets == ["Wrote reports"]

    def test_title_without_organization_is_ignored(self):
        assert parse_experience("Senior Engineer\nDid a lot of things") == []

    def test_single_line_text(self):
        # Extracted page text has no line breaks
        text = "Senior Engineer Acme Inc 2020 - 2022 built things " * 200

        assert parse_experience(text) == []


class TestParseProjects:

    def test_projects_with_links_and_technologies(self):
        text = (
            "Inventory Tracker\n"
            "- Built with Django and PostgreSQL, hosted at https://inventory.example.com\n"
            "- Source on github.com/jdoe\n"
            "Chat Bot\n"
            "A conversational assistant that answers support questions using Python "
            "and Redis for caching of sessions."
        )

        projects = parse_projects(text)

        assert [project.title for project in projects] == ["Inventory Tracker", "Chat Bot"]
        tracker, bot = projects
        assert tracker.highlights == [
            "Built with Django and PostgreSQL, hosted at https://inventory.example.com",
            "Source on github.com/jdoe",
        ]
        assert "Django" in tracker.technologies
        assert "PostgreSQL" in tracker.technologies
        assert tracker.github == "https://github.com/jdoe"
        assert tracker.url == "https://inventory.example.com"
        assert bot.description.startswith("A conversational assistant")
        assert bot.technologies == ["Python", "Redis"]
        assert bot.url is None
        assert bot.github is None

    def test_no_projects(self):
        assert parse_projects("") == []


class TestParseEducation:
    """Test suite for parse_education."""

    def test_degrees_with_details(self):
        text = (
            "Bachelor of Science in Computer Science\n"
            "State University\n"
            "Graduated May 2016, GPA: 3.8, magna cum laude\n"
            "Master of Science in Data Engineering\n"
            "Tech Institute\n"
            "2018"
        )

        education = parse_education(text)

        assert len(education) == 2
        bachelor, master = education
        assert bachelor.degree == "Bachelor of Science in Computer Science"
        assert bachelor.institution == "State University"
        assert bachelor.graduation_date == "2016"
        assert bachelor.gpa == "3.8"
        assert bachelor.honors == ["magna cum laude"]
        assert master.degree == "Master of Science in Data Engineering"
        assert master.graduation_date == "2018"
        assert master.gpa is None
        assert master.honors == []

    def test_plural_degree_names(self):
        text = (
            "Bachelors in Physics\n"
            "State University\n"
            "2012\n"
            "Masters of Engineering\n"
            "Tech Institute\n"
            "2014"
        )

        education = parse_education(text)

        assert [(e.degree, e.institution, e.graduation_date) for e in education] == [
            ("Bachelors in Physics", "State University", "2012"),
            ("Masters of Engineering", "Tech Institute", "2014"),
        ]

    def test_degree_word_must_end_the_token(self):
        assert parse_education("Bachelorette of Arts in History\nState University") == []

    def test_degree_without_institution_is_ignored(self):
        assert parse_education("Bachelor of Arts in History\nGraduated 2010") == []


class TestParseCertifications:

    def test_known_certifications(self):
        text = "CompTIA Security+ certified. AWS Certified Solutions Architect. CISSP"

        certifications = parse_certifications(text)

        assert [(c.name, c.issuer) for c in certifications] == [
            ("Security+", "Various"),
            ("CISSP", "Various"),
            ("AWS Certified", "Amazon"),
            ("CompTIA", "Various"),
        ]
        assert all(c.date == "" for c in certifications)

    def test_azure_issuer(self):
        [certification] = parse_certifications("Azure Certified Administrator")

        assert certification.issuer == "Microsoft"


class TestExtractKeywords:

    def test_frequency_then_first_seen_order(self):
        text = "Python python Docker the and Kubernetes docker api"

        assert extract_keywords(text) == ["python", "docker", "kubernetes", "api"]

    def test_short_words_and_stop_words_are_skipped(self):
        assert extract_keywords("to be or not at all go") == []

    def test_limit(self):
        text = " ".join(f"word{n}" for n in range(30))

        assert len(extract_keywords(text)) == 20
