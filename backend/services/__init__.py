"""Services for the PDF document and resume pipeline."""
from .errors import LoadError, LoadErrorKind, ExtractionError, PageOutOfRange, RenderCancelled, ParseWarning
from .pdf_engine import PDFEngine, PyMuPDFEngine
from .pdf_document import LoadedDocument
from .document_loader import DocumentLoader
from .toc_generator import TOCGenerator
from .chunking_engine import ChunkingEngine
from .search_index import SearchIndex
from .retrieval_engine import RetrievalEngine
from .document_pipeline import DocumentPipeline, PipelineStatus
from .resume_sections import segment_sections
from .resume_parser import ResumeParser, merge_overrides, default_resume, load_overrides

__all__ = ['LoadError', 'LoadErrorKind', 'ExtractionError', 'PageOutOfRange', 'RenderCancelled', 'ParseWarning', 'PDFEngine', 'PyMuPDFEngine', 'LoadedDocument', 'DocumentLoader', 'TOCGenerator', 'ChunkingEngine', 'SearchIndex', 'RetrievalEngine', 'DocumentPipeline', 'PipelineStatus', 'segment_sections', 'ResumeParser', 'merge_overrides', 'default_resume', 'load_overrides']
