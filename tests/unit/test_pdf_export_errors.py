"""Tests for PDF export failures that do not need WeasyPrint installed."""

import sys

import pytest
from unittest.mock import MagicMock, patch

from smartquote.config.errors import ExportError, ErrorCode
from smartquote.models.quote import QuoteResponse
from smartquote.services.pdf_generator import export_pdf


class TestExportErrors:
    """Tests for blocking export notices."""

    def test_library_unavailable(self, sample_quote, sample_project_input, tmp_path, mock_settings):
        with patch.dict(sys.modules, {"weasyprint": None}):
            with pytest.raises(ExportError) as exc_info:
                export_pdf(sample_quote, sample_project_input, tmp_path / "quote.pdf")

        assert exc_info.value.code == ErrorCode.EXPORT_UNAVAILABLE
        assert not (tmp_path / "quote.pdf").exists()

    def test_render_failure(self, sample_quote, sample_project_input, tmp_path, mock_settings):
        weasyprint = MagicMock()
        weasyprint.HTML.return_value.write_pdf.side_effect = RuntimeError("No fonts found")
        modules = {
            "weasyprint": weasyprint,
            "weasyprint.text": weasyprint.text,
            "weasyprint.text.fonts": weasyprint.text.fonts,
        }

        with patch.dict(sys.modules, modules):
            with pytest.raises(ExportError) as exc_info:
                export_pdf(sample_quote, sample_project_input, tmp_path / "quote.pdf")

        assert exc_info.value.code == ErrorCode.EXPORT_FAILED
        assert "No fonts found" in exc_info.value.message
        assert not (tmp_path / "quote.pdf").exists()

    def test_write_failure(self, sample_quote, sample_project_input, tmp_path, mock_settings):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        with patch("smartquote.services.pdf_generator._html_to_pdf", return_value=b"%PDF-1.7"):
            with pytest.raises(ExportError) as exc_info:
                export_pdf(sample_quote, sample_project_input, blocker / "quote.pdf")

        assert exc_info.value.code == ErrorCode.EXPORT_FAILED

    def test_invalid_theme(self, sample_quote, sample_project_input, tmp_path, mock_settings):
        with pytest.raises(ValueError):
            export_pdf(sample_quote, sample_project_input, tmp_path / "q.pdf", theme="sepia")

    def test_tolerance_reaches_template(self, sample_quote_data, sample_project_input, tmp_path,
                                        mock_settings):
        sample_quote_data["totalEstimatedCost"] = 18580
        quote = QuoteResponse.model_validate(sample_quote_data)

        with patch("smartquote.services.pdf_generator._html_to_pdf", return_value=b"%PDF-1.7") as mock_pdf:
            export_pdf(quote, sample_project_input, tmp_path / "q.pdf", tolerance=500)

        assert "off the total" not in mock_pdf.call_args.args[0]
