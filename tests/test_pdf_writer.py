"""
Unit tests for PdfWriter and its helpers.
"""

import pytest
from datetime import date
from unittest.mock import patch
from pathlib import Path
import tempfile

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.briefs import build_coordination_briefs
from domain.derivation import derive_dashboard
from domain.seed import seed_snapshot
from infrastructure.pdf_writer import BriefPdf, PdfWriter, format_filename, to_latin1

TODAY = date(2025, 3, 12)


class TestFormatFilename:
    """Tests for format_filename utility function."""

    def test_date_placeholder(self):
        assert format_filename("Brief_{date}.pdf", TODAY) == "Brief_2025-03-12.pdf"

    def test_month_padding(self):
        assert format_filename("Report_{year}_{month}.xlsx", date(2025, 1, 9)) == "Report_2025_01.xlsx"


class TestToLatin1:
    """Tests for the core-font fallback transliteration."""

    def test_rupee_sign(self):
        assert to_latin1("₹1,80,000") == "Rs.1,80,000"

    def test_unmappable_characters(self):
        assert to_latin1("Crew ✓") == "Crew ?"


class TestBriefPdf:
    """Tests for BriefPdf class."""

    def test_fallback_font(self):
        with patch("infrastructure.pdf_writer.find_unicode_font", return_value=None):
            pdf = BriefPdf(title="Test Brief")
        assert pdf.title_text == "Test Brief"
        assert pdf.font_family_name == "Helvetica"
        assert not pdf.unicode_enabled
        assert pdf.text_for("₹500") == "Rs.500"

    def test_unloadable_font_falls_back(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            bogus = Path(tmpdir) / "broken.ttf"
            bogus.write_bytes(b"not a font")
            with patch("infrastructure.pdf_writer.find_unicode_font", return_value=bogus):
                pdf = BriefPdf(title="Test")
        assert pdf.font_family_name == "Helvetica"


class TestPdfWriter:
    """Tests for PdfWriter class."""

    def test_create_brief(self):
        view = derive_dashboard(seed_snapshot(TODAY), TODAY)
        briefs = build_coordination_briefs(view)

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "nested" / "brief.pdf"
            with patch("infrastructure.pdf_writer.find_unicode_font", return_value=None):
                result = PdfWriter().create_brief(view, briefs, TODAY, output_path)

            assert result == output_path
            assert output_path.exists()
            assert output_path.read_bytes().startswith(b"%PDF")
