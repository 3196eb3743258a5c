"""Tests for the inspect_document command-line script."""
import json
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from inspect_document import main


class TestInspectDocument:

    def test_text_report(self, sample_pdf, tmp_path, capsys):
        pdf_path = tmp_path / "guide.pdf"
        pdf_path.write_bytes(sample_pdf)

        exit_code = main([str(pdf_path), "--search", "deployment"])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert output.startswith("Deployment Guide (3 pages, 3 chunks)")
        assert "  Introduction .... p.1" in output
        assert "    Installation .... p.2" in output
        assert "Search 'deployment': 2 results" in output

    def test_json_report_with_resume(self, sample_pdf, tmp_path, capsys):
        pdf_path = tmp_path / "guide.pdf"
        pdf_path.write_bytes(sample_pdf)
        overrides = tmp_path / "overrides.json"
        overrides.write_text(json.dumps({"contact": {"name": "Ops Team"}}), encoding="utf-8")

        exit_code = main([str(pdf_path), "--json", "--resume", "--overrides", str(overrides)])

        report = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert report["num_pages"] == 3
        assert len(report["toc"]) == 3
        assert "search" not in report
        assert report["resume"]["contact"]["name"] == "Ops Team"
        assert "skills" in [warning["section"] for warning in report["resume_warnings"]]

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.pdf")]) == 1
