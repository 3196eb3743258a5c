"""Main entry point for the PDF document and resume pipeline API."""
import logging
import threading
from collections import OrderedDict
from dataclasses import asdict
from typing import List, Optional
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from config import (
    CORS_ORIGINS,
    DOCUMENTS_DIR,
    LOG_FORMAT,
    LOG_LEVEL,
    MAX_LOADED_DOCUMENTS,
    PORT,
    REMOTE_SOURCE_HOSTS,
    RESUME_OVERRIDES_PATH,
)
from logger import setup_logging
from models.api import DocumentResponse, LoadRequest, ProgressResponse, ResumeRequest
from services.document_loader import DocumentLoader
from services.document_pipeline import DocumentPipeline
from services.errors import LoadError, LoadErrorKind, SourceNotAllowed
from services.resume_parser import ResumeParser, load_overrides, merge_overrides
from services.source_policy import resolve_source

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Document Pipeline API",
    description="PDF text extraction, table of contents, search and resume parsing",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
document_loader: DocumentLoader = None
# Fingerprint -> pipeline, least recently used first
pipelines: "OrderedDict[str, DocumentPipeline]" = OrderedDict()
pipelines_lock = threading.Lock()

DOCUMENTS_URL = "/documents"


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global document_loader

    setup_logging(LOG_LEVEL, LOG_FORMAT)

    logger.info("Initializing document pipeline services...")

    try:
        # Redirects could lead outside REMOTE_SOURCE_HOSTS
        document_loader = DocumentLoader(follow_redirects=False)
        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Release every loaded document."""
    with pipelines_lock:
        for pipeline in pipelines.values():
            pipeline.reset()
        pipelines.clear()


def _load_error_response(error: LoadError) -> HTTPException:
    status_code = 422 if error.kind == LoadErrorKind.UNREADABLE else 502
    logger.error(f"Document load failed ({error.kind.value}): {error.message}")
    return HTTPException(
        status_code=status_code,
        detail={
            "error": error.to_dict(),
            "documents_url": DOCUMENTS_URL
        }
    )


def _client_source(source: str) -> str:
    try:
        return resolve_source(source, DOCUMENTS_DIR, REMOTE_SOURCE_HOSTS)
    except SourceNotAllowed as e:
        raise HTTPException(
            status_code=403,
            detail={
                "error": e.to_dict(),
                "documents_url": DOCUMENTS_URL
            }
        )


def _get_pipeline(fingerprint: str) -> DocumentPipeline:
    with pipelines_lock:
        pipeline = pipelines.get(fingerprint)
        if pipeline is not None:
            pipelines.move_to_end(fingerprint)
    if pipeline is None:
        raise HTTPException(status_code=404, detail=f"Document {fingerprint} is not loaded")
    return pipeline


def _document_response(pipeline: DocumentPipeline) -> DocumentResponse:
    info = pipeline.info
    return DocumentResponse(
        fingerprint=info.fingerprint,
        title=info.display_title,
        num_pages=info.num_pages,
        file_size=info.file_size,
        filename=info.filename,
        metadata=asdict(info.metadata),
        status=pipeline.status,
        progress=pipeline.progress,
        chunks_indexed=pipeline.search_index.count(),
        toc_entries=len(pipeline.toc)
    )


def _load_pipeline(source, filename: Optional[str]) -> DocumentResponse:
    pipeline = DocumentPipeline(loader=document_loader)
    try:
        info = pipeline.load(source, filename=filename)
    except LoadError as e:
        raise _load_error_response(e)

    released = []
    with pipelines_lock:
        previous = pipelines.pop(info.fingerprint, None)
        if previous is not None:
            released.append(previous)
        pipelines[info.fingerprint] = pipeline
        while len(pipelines) > max(MAX_LOADED_DOCUMENTS, 1):
            fingerprint, evicted = pipelines.popitem(last=False)
            logger.info(f"Evicting least recently used document {fingerprint}")
            released.append(evicted)

    for old_pipeline in released:
        old_pipeline.reset()

    return _document_response(pipeline)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Document Pipeline API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "document-pipeline",
        "version": "1.0.0",
        "documents_loaded": len(pipelines)
    }


@app.get("/documents", response_model=List[DocumentResponse])
def list_documents() -> List[DocumentResponse]:
    """Documents currently loaded."""
    with pipelines_lock:
        loaded = [p for p in pipelines.values() if p.info is not None]
    return [_document_response(pipeline) for pipeline in loaded]


@app.post("/documents", response_model=DocumentResponse)
def load_document(request: LoadRequest) -> DocumentResponse:
    """
    Load a document by allowed URL or by path under DOCUMENTS_DIR, then
    extract, index and build its TOC.

    Raises:
        HTTPException: 403 for sources outside DOCUMENTS_DIR or the allowed
            hosts, 422 for unreadable PDFs, 502 for unavailable sources
    """
    if not request.source or not request.source.strip():
        raise HTTPException(status_code=400, detail="Source field is required and cannot be empty")

    source = _client_source(request.source.strip())
    logger.info(f"Loading document: {source[:200]}")
    return _load_pipeline(source, request.filename)


@app.post("/documents/upload", response_model=DocumentResponse)
async def upload_document(request: Request, filename: Optional[str] = None) -> DocumentResponse:
    """Load a document from the raw request body."""
    data = await request.body()
    if not data:
        raise HTTPException(status_code=400, detail="Request body must contain PDF bytes")

    logger.info(f"Loading uploaded document ({len(data)} bytes)")
    return await run_in_threadpool(_load_pipeline, data, filename)


@app.get("/documents/{fingerprint}", response_model=DocumentResponse)
def get_document(fingerprint: str) -> DocumentResponse:
    return _document_response(_get_pipeline(fingerprint))


@app.get("/documents/{fingerprint}/progress", response_model=ProgressResponse)
def get_progress(fingerprint: str) -> ProgressResponse:
    pipeline = _get_pipeline(fingerprint)
    return ProgressResponse(status=pipeline.status, progress=pipeline.progress, error=pipeline.error)


@app.get("/documents/{fingerprint}/pages/{page_number}")
def get_page(fingerprint: str, page_number: int):
    """Extracted text and positioned fragments of one page."""
    page_info = _get_pipeline(fingerprint).get_page_info(page_number)
    if page_info is None:
        raise HTTPException(status_code=404, detail=f"Page {page_number} not found")
    return asdict(page_info)


@app.get("/documents/{fingerprint}/pages/{page_number}/image")
def get_page_image(
    fingerprint: str,
    page_number: int,
    scale: float = Query(1.0, gt=0, le=4)
):
    """Page rendered as PNG."""
    image = _get_pipeline(fingerprint).render_page(page_number, scale)
    if image is None:
        raise HTTPException(status_code=404, detail=f"Page {page_number} could not be rendered")
    return Response(content=image, media_type="image/png")


@app.get("/documents/{fingerprint}/toc")
def get_toc(fingerprint: str):
    return [asdict(entry) for entry in _get_pipeline(fingerprint).toc]


@app.get("/documents/{fingerprint}/search")
def search_document(fingerprint: str, q: str = ""):
    """Search the document's index; blank queries return an empty list."""
    results = _get_pipeline(fingerprint).search(q)
    return [asdict(result) for result in results]


@app.delete("/documents/{fingerprint}")
def delete_document(fingerprint: str):
    with pipelines_lock:
        pipeline = pipelines.pop(fingerprint, None)
    if pipeline is None:
        raise HTTPException(status_code=404, detail=f"Document {fingerprint} is not loaded")
    pipeline.reset()
    return {"status": "deleted", "fingerprint": fingerprint}


@app.post("/resume")
def parse_resume(request: ResumeRequest):
    """
    Parse a resume PDF into structured sections.

    A resume that cannot be loaded still produces a response built from
    filename-derived defaults, so the landing page is never blocked.
    """
    if not request.source or not request.source.strip():
        raise HTTPException(status_code=400, detail="Source field is required and cannot be empty")

    source = _client_source(request.source.strip())
    resume_parser = ResumeParser(document_loader)

    try:
        resume = resume_parser.parse_or_default(source, filename=request.filename)

        if request.apply_overrides:
            resume = merge_overrides(
                resume, load_overrides(RESUME_OVERRIDES_PATH), resume_parser.warnings
            )

        return {
            "resume": resume.to_dict(),
            "warnings": [asdict(warning) for warning in resume_parser.warnings]
        }
    except Exception as e:
        logger.error(f"Unexpected error parsing resume: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Internal server error: {str(e)}"
        )


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Document Pipeline API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
