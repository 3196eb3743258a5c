"""Restrict which paths and URLs API clients may ask the server to load."""
import logging
from pathlib import Path
from typing import Iterable
from urllib.parse import urlparse

from services.errors import SourceNotAllowed

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http://", "https://")


def resolve_source(source: str, documents_dir: str, allowed_hosts: Iterable[str] = ()) -> str:
    """
    Map a client source onto something the server is willing to read.

    URLs pass only when their host is in allowed_hosts. Anything else is a
    path relative to documents_dir and must stay inside it after resolving
    symlinks and "..".

    Args:
        source: URL or path sent by the client
        documents_dir: Directory that holds loadable documents
        allowed_hosts: Hostnames remote sources may be fetched from

    Returns:
        The URL unchanged, or the absolute path of the file

    Raises:
        SourceNotAllowed: If the source is outside what the server exposes
    """
    if source.lower().startswith(REMOTE_SCHEMES):
        host = (urlparse(source).hostname or "").lower()
        if host and host in {h.strip().lower() for h in allowed_hosts}:
            return source
        logger.warning(f"Rejected remote source on host {host!r}")
        raise SourceNotAllowed(f"Remote host {host!r} is not allowed", source)

    if "://" in source:
        raise SourceNotAllowed("Only http(s) URLs and document paths are supported", source)

    base = Path(documents_dir).resolve()
    try:
        candidate = (base / source).resolve()
    except (OSError, ValueError) as e:
        raise SourceNotAllowed(f"Invalid document path: {str(e)}", source) from e
    if candidate != base and base not in candidate.parents:
        logger.warning(f"Rejected path outside {base}: {source!r}")
        raise SourceNotAllowed("Source is outside the documents directory", source)

    return str(candidate)
