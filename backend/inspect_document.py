"""
Document inspection script.

This script:
1. Loads a PDF from a path or URL
2. Extracts every page and builds the search index
3. Prints the table of contents
4. Optionally runs a search query
5. Optionally parses the document as a resume

Usage:
    python inspect_document.py docs/resume.pdf --search "kubernetes" --resume
"""
import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from config import RESUME_OVERRIDES_PATH
from services.document_pipeline import DocumentPipeline
from services.errors import LoadError
from services.resume_parser import ResumeParser, load_overrides, merge_overrides

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Inspection process; returns the exit code."""
    parser = argparse.ArgumentParser(
        description="Extract, index and inspect a PDF document"
    )
    parser.add_argument("source", help="Path or http(s) URL of the PDF")
    parser.add_argument("--search", help="Query to run against the index")
    parser.add_argument(
        "--resume",
        action="store_true",
        help="Parse the document as a resume"
    )
    parser.add_argument(
        "--overrides",
        default=RESUME_OVERRIDES_PATH,
        help=f"Resume overrides JSON file (default: {RESUME_OVERRIDES_PATH})"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON object instead of a text report"
    )

    args = parser.parse_args(argv)

    pipeline = DocumentPipeline()
    pipeline.add_progress_listener(lambda p: logger.debug(f"Indexing {p:.0f}%"))

    try:
        info = pipeline.load(args.source)
    except LoadError as e:
        logger.error(f"Could not load {args.source}: {e.message}")
        return 1

    try:
        report = {
            "title": info.display_title,
            "num_pages": info.num_pages,
            "fingerprint": info.fingerprint,
            "chunks": pipeline.search_index.count(),
            "toc": [asdict(entry) for entry in pipeline.toc],
        }

        if args.search:
            report["search"] = [asdict(result) for result in pipeline.search(args.search)]

        if args.resume:
            resume_parser = ResumeParser()
            resume = resume_parser.parse_text(pipeline.text_content)
            resume = merge_overrides(resume, load_overrides(args.overrides), resume_parser.warnings)
            report["resume"] = resume.to_dict()
            report["resume_warnings"] = [asdict(warning) for warning in resume_parser.warnings]
    finally:
        pipeline.reset()

    if args.json:
        print(json.dumps(report, indent=2, default=str))
        return 0

    print(f"{report['title']} ({report['num_pages']} pages, {report['chunks']} chunks)")
    print(f"Fingerprint: {report['fingerprint']}")
    print("\nTable of contents:")
    for entry in report["toc"]:
        indent = "  " * (entry["level"] - 1)
        print(f"  {indent}{entry['title']} .... p.{entry['page_number']}")

    if args.search:
        print(f"\nSearch {args.search!r}: {len(report['search'])} results")
        for result in report["search"]:
            print(f"  p.{result['page_number']} [{result['score']:.2f}] {result['context'][:120]}")

    if args.resume:
        print("\nResume:")
        print(json.dumps(report["resume"], indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
