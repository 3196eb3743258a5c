"""Document loading service for PDF processing."""
import hashlib
import logging
import os
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Union
import httpx

from config import FETCH_TIMEOUT
from models.document import DocumentInfo, PDFMetadata
from services.errors import LoadError, LoadErrorKind
from services.pdf_document import LoadedDocument
from services.pdf_engine import PDFEngine, PyMuPDFEngine

logger = logging.getLogger(__name__)

Source = Union[str, bytes, bytearray, os.PathLike]

# D:YYYYMMDDHHmmSSOHH'mm' with everything after the year optional
_PDF_DATE = re.compile(
    r"^(?:D:)?(\d{4})(\d{2})?(\d{2})?(\d{2})?(\d{2})?(\d{2})?"
    r"(?:([Zz+\-])(\d{2})?'?(\d{2})?'?)?"
)


def parse_pdf_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a PDF date string into a datetime.

    Args:
        value: Date string such as "D:20230115093000+01'00'"

    Returns:
        datetime (timezone-aware when the string carries an offset), or None
    """
    if not value:
        return None

    match = _PDF_DATE.match(value.strip())
    if not match:
        return None

    year, month, day, hour, minute, second, sign, tz_hour, tz_minute = match.groups()
    try:
        tzinfo = None
        if sign in ("Z", "z"):
            tzinfo = timezone.utc
        elif sign:
            offset = timedelta(hours=int(tz_hour or 0), minutes=int(tz_minute or 0))
            tzinfo = timezone(offset if sign == "+" else -offset)

        return datetime(
            int(year),
            int(month or 1),
            int(day or 1),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            tzinfo=tzinfo
        )
    except ValueError:
        return None


class DocumentLoader:
    """Loads PDFs from URLs, paths or bytes into LoadedDocument handles."""

    def __init__(
        self,
        engine: Optional[PDFEngine] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = FETCH_TIMEOUT,
        follow_redirects: bool = True
    ):
        """
        Initialize DocumentLoader.

        Args:
            engine: Decoding engine (defaults to PyMuPDF)
            http_client: Client used for http(s) sources (created per request if omitted)
            timeout: Request timeout in seconds for http(s) sources
            follow_redirects: Whether http(s) fetches follow redirects
        """
        self.engine = engine or PyMuPDFEngine()
        self.http_client = http_client
        self.timeout = timeout
        self.follow_redirects = follow_redirects

    def load(self, source: Source, filename: Optional[str] = None) -> LoadedDocument:
        """
        Load a single PDF.

        Args:
            source: http(s) URL, filesystem path, or raw PDF bytes
            filename: Name used as a fallback title

        Returns:
            LoadedDocument handle

        Raises:
            LoadError: UNAVAILABLE if the bytes cannot be retrieved,
                UNREADABLE if they are not a valid PDF
        """
        data = self._read_source(source)
        label = filename or (source if isinstance(source, str) else "<bytes>")

        if not data:
            raise LoadError(LoadErrorKind.UNREADABLE, "Document is empty", label)

        try:
            engine_document = self.engine.open(data)
        except Exception as e:
            logger.error(f"Failed to load PDF: {str(e)}", extra={"source": label})
            raise LoadError(
                LoadErrorKind.UNREADABLE, f"Failed to load PDF document: {str(e)}", label
            ) from e

        if filename is None and isinstance(source, (str, os.PathLike)):
            filename = os.path.basename(str(source).split("?", 1)[0]) or None

        info = DocumentInfo(
            metadata=self._extract_metadata(engine_document),
            num_pages=engine_document.page_count,
            fingerprint=hashlib.sha256(data).hexdigest(),
            file_size=len(data),
            filename=filename
        )

        logger.info(
            f"Loaded {label}",
            extra={"fingerprint": info.fingerprint, "source": label, "pages": info.num_pages}
        )
        return LoadedDocument(engine_document, info)

    def _read_source(self, source: Source) -> bytes:
        if isinstance(source, (bytes, bytearray)):
            return bytes(source)

        location = str(source)
        if location.startswith(("http://", "https://")):
            return self._fetch(location)

        try:
            with open(location, "rb") as f:
                return f.read()
        except OSError as e:
            logger.error(f"Could not read document: {str(e)}", extra={"source": location})
            raise LoadError(
                LoadErrorKind.UNAVAILABLE, f"Could not read document: {str(e)}", location
            ) from e

    def _fetch(self, url: str) -> bytes:
        try:
            if self.http_client is not None:
                response = self.http_client.get(
                    url, timeout=self.timeout, follow_redirects=self.follow_redirects
                )
            else:
                with httpx.Client() as client:
                    response = client.get(
                        url, timeout=self.timeout, follow_redirects=self.follow_redirects
                    )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Could not fetch document: {str(e)}", extra={"source": url})
            raise LoadError(
                LoadErrorKind.UNAVAILABLE, f"Could not fetch document: {str(e)}", url
            ) from e

        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    def _extract_metadata(self, engine_document) -> PDFMetadata:
        try:
            info = engine_document.metadata()
        except Exception as e:
            logger.error(f"Error extracting metadata: {str(e)}")
            return PDFMetadata()

        return PDFMetadata(
            title=info.get("Title") or None,
            author=info.get("Author") or None,
            subject=info.get("Subject") or None,
            creator=info.get("Creator") or None,
            producer=info.get("Producer") or None,
            creation_date=parse_pdf_date(info.get("CreationDate")),
            modification_date=parse_pdf_date(info.get("ModDate")),
            keywords=info.get("Keywords") or None
        )
