"""Unit tests for DocumentLoader."""
import hashlib
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import httpx
import pytest

from conftest import FakeDocument, FakeEngine, text_page
from services.document_loader import DocumentLoader, parse_pdf_date
from services.errors import LoadError, LoadErrorKind


class TestDocumentLoader:
    """Test suite for DocumentLoader."""

    def test_load_from_bytes(self, sample_pdf):
        """Test loading a real PDF from memory."""
        document = DocumentLoader().load(sample_pdf, filename="guide.pdf")

        assert document.num_pages == 3
        assert document.fingerprint == hashlib.sha256(sample_pdf).hexdigest()
        assert document.metadata.title == "Deployment Guide"
        assert document.metadata.author == "Ops Team"
        assert document.info.file_size == len(sample_pdf)
        assert document.info.filename == "guide.pdf"

        document.destroy()

    def test_fingerprint_is_stable(self, sample_pdf):
        """Test the same bytes always give the same fingerprint."""
        loader = DocumentLoader()
        first = loader.load(sample_pdf)
        second = loader.load(sample_pdf)

        assert first.fingerprint == second.fingerprint

        first.destroy()
        second.destroy()

    def test_load_from_path(self, sample_pdf, tmp_path):
        """Test loading from a file path uses the file name."""
        pdf_path = tmp_path / "handbook.pdf"
        pdf_path.write_bytes(sample_pdf)

        document = DocumentLoader().load(str(pdf_path))

        assert document.num_pages == 3
        assert document.info.filename == "handbook.pdf"
        document.destroy()

    def test_missing_file_is_unavailable(self, tmp_path):
        """Test a missing file raises LoadError UNAVAILABLE."""
        with pytest.raises(LoadError) as exc_info:
            DocumentLoader().load(str(tmp_path / "missing.pdf"))

        assert exc_info.value.kind == LoadErrorKind.UNAVAILABLE

    def test_garbage_bytes_are_unreadable(self):
        """Test non-PDF bytes raise LoadError UNREADABLE."""
        with pytest.raises(LoadError) as exc_info:
            DocumentLoader().load(b"this is definitely not a pdf file")

        assert exc_info.value.kind == LoadErrorKind.UNREADABLE

    def test_empty_bytes_are_unreadable(self):
        """Test empty input raises LoadError UNREADABLE."""
        with pytest.raises(LoadError) as exc_info:
            DocumentLoader().load(b"")

        assert exc_info.value.kind == LoadErrorKind.UNREADABLE

    def test_engine_failure_is_unreadable(self):
        """Test any engine error is wrapped as UNREADABLE."""
        loader = DocumentLoader(engine=FakeEngine(error=RuntimeError("bad xref")))

        with pytest.raises(LoadError, match="bad xref") as exc_info:
            loader.load(b"%PDF-1.4")

        assert exc_info.value.kind == LoadErrorKind.UNREADABLE

    def test_load_from_url(self, sample_pdf):
        """Test http(s) sources are fetched with httpx."""
        def handler(request):
            assert request.url.path == "/docs/guide.pdf"
            return httpx.Response(200, content=sample_pdf)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        document = DocumentLoader(http_client=client).load("https://example.com/docs/guide.pdf")

        assert document.num_pages == 3
        assert document.info.filename == "guide.pdf"
        document.destroy()

    def test_http_error_is_unavailable(self):
        """Test a 404 response raises LoadError UNAVAILABLE."""
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

        with pytest.raises(LoadError) as exc_info:
            DocumentLoader(http_client=client).load("https://example.com/missing.pdf")

        assert exc_info.value.kind == LoadErrorKind.UNAVAILABLE
        assert exc_info.value.source == "https://example.com/missing.pdf"

    def test_redirects_can_be_refused(self, sample_pdf):
        """Test a loader that refuses redirects never requests the target."""
        requested = []

        def handler(request):
            requested.append(request.url.host)
            if request.url.host == "docs.example.com":
                return httpx.Response(302, headers={"Location": "http://169.254.169.254/doc.pdf"})
            return httpx.Response(200, content=sample_pdf)

        client = httpx.Client(transport=httpx.MockTransport(handler))

        with pytest.raises(LoadError) as exc_info:
            DocumentLoader(http_client=client, follow_redirects=False).load("https://docs.example.com/doc.pdf")

        assert exc_info.value.kind == LoadErrorKind.UNAVAILABLE
        assert requested == ["docs.example.com"]

    def test_load_is_logged_with_document_context(self, sample_pdf, caplog):
        """Test the load log line carries fingerprint and page count."""
        caplog.set_level("INFO", logger="services.document_loader")

        document = DocumentLoader().load(sample_pdf, filename="guide.pdf")

        record = next(r for r in caplog.records if r.getMessage() == "Loaded guide.pdf")
        assert record.fingerprint == document.fingerprint
        assert record.pages == 3
        assert record.source == "guide.pdf"
        document.destroy()

    def test_connection_error_is_unavailable(self):
        """Test network failures surface as UNAVAILABLE instead of hanging."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))

        with pytest.raises(LoadError) as exc_info:
            DocumentLoader(http_client=client).load("http://localhost:1/doc.pdf")

        assert exc_info.value.kind == LoadErrorKind.UNAVAILABLE

    def test_metadata_failure_yields_empty_metadata(self, load_fake):
        """Test a broken metadata stream does not fail the load."""
        document = load_fake(FakeDocument([text_page("hello world")], metadata_error=True))

        assert document.num_pages == 1
        assert document.metadata.title is None
        assert document.metadata.creation_date is None

    def test_metadata_dates_are_parsed(self, load_fake):
        """Test PDF date strings become datetimes."""
        document = load_fake(FakeDocument(
            [text_page("hello")],
            metadata={
                "Title": "Resume",
                "CreationDate": "D:20230115093000+01'00'",
                "ModDate": "garbage"
            }
        ))

        assert document.metadata.title == "Resume"
        assert document.metadata.creation_date == datetime(
            2023, 1, 15, 9, 30, 0, tzinfo=timezone(timedelta(hours=1))
        )
        assert document.metadata.modification_date is None

    def test_error_to_dict(self):
        """Test LoadError serializes to a structured error."""
        error = LoadError(LoadErrorKind.UNAVAILABLE, "Could not fetch", "https://x/y.pdf")

        assert error.to_dict() == {
            "code": "UNAVAILABLE",
            "message": "Could not fetch",
            "details": {"source": "https://x/y.pdf"}
        }


class TestParsePdfDate:
    """Test suite for parse_pdf_date."""

    def test_utc_suffix(self):
        assert parse_pdf_date("D:20240301120000Z") == datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_negative_offset(self):
        parsed = parse_pdf_date("D:20240301120000-05'00'")
        assert parsed.utcoffset() == timedelta(hours=-5)

    def test_year_only(self):
        assert parse_pdf_date("D:2021") == datetime(2021, 1, 1)

    def test_invalid_values(self):
        assert parse_pdf_date(None) is None
        assert parse_pdf_date("") is None
        assert parse_pdf_date("yesterday") is None
        assert parse_pdf_date("D:20241399000000") is None
