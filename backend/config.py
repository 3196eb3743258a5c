"""Configuration management for the PDF document and resume pipeline."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "plain")  # "plain" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Document Loading Configuration
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "30"))  # seconds
RESUME_OVERRIDES_PATH = os.getenv("RESUME_OVERRIDES_PATH", "content/overrides.json")

# Client-supplied paths resolve under this directory; URLs need an allowed host
DOCUMENTS_DIR = os.getenv("DOCUMENTS_DIR", "content/documents")
REMOTE_SOURCE_HOSTS = [
    host.strip() for host in os.getenv("REMOTE_SOURCE_HOSTS", "").split(",") if host.strip()
]
MAX_LOADED_DOCUMENTS = int(os.getenv("MAX_LOADED_DOCUMENTS", "8"))  # least recently used is evicted

# Chunking Configuration
CHUNK_WORDS = 50  # words per indexed chunk
CONTEXT_WORDS_BEFORE = 10
CONTEXT_WORDS_AFTER = 10

# Search Configuration
MAX_SEARCH_RESULTS = 50

# Table of Contents Configuration
TOC_PAGE_LIMIT = 10  # heuristic pass only looks at the first N pages
HEADING_FONT_RATIO = 1.2
DEFAULT_FONT_SIZE = 12.0

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
