"""
PDF export for SmartQuote.

Converts the rendered quote region into a fixed-size A4 document using
WeasyPrint and the Jinja2 quote template, in the active (light/dark) theme.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Union
import time

import structlog

from smartquote.config.errors import ExportError, ErrorCode
from smartquote.models.project_input import ProjectInput
from smartquote.models.quote import QuoteResponse
from smartquote.services.presentation import TEMPLATE_DIR, render_html

# Configure structlog logger
logger = structlog.get_logger(__name__)


@dataclass
class ExportResult:
    """
    Result of a PDF export.

    Attributes:
        output_path: Absolute path of the written PDF
        page_count: Number of pages in the generated PDF
        file_size_bytes: Size of the PDF file in bytes
        generated_at: ISO timestamp when the PDF was generated
    """

    output_path: str
    page_count: int
    file_size_bytes: int
    generated_at: str


def _html_to_pdf(html_content: str) -> bytes:
    """
    Convert HTML to PDF using WeasyPrint.

    Raises:
        ExportError: If WeasyPrint or its native libraries are unavailable
            (EXPORT_UNAVAILABLE), or rendering fails (EXPORT_FAILED)
    """
    try:
        from weasyprint import HTML
        from weasyprint.text.fonts import FontConfiguration
    except (ImportError, OSError) as e:
        raise ExportError(
            "The PDF library could not be loaded",
            code=ErrorCode.EXPORT_UNAVAILABLE,
            details={"original_error": str(e)},
        ) from e

    try:
        font_config = FontConfiguration()
        html_doc = HTML(string=html_content, base_url=str(TEMPLATE_DIR))
        return html_doc.write_pdf(font_config=font_config)
    except Exception as e:
        logger.error("pdf_render_error", error=str(e), error_type=type(e).__name__)
        raise ExportError(
            f"PDF rendering failed: {e}",
            code=ErrorCode.EXPORT_FAILED,
            details={"original_error": str(e)},
        ) from e


def _count_pdf_pages(pdf_bytes: bytes) -> int:
    """Rough page count from /Type /Page markers."""
    content = pdf_bytes.decode("latin-1", errors="ignore")
    return content.count("/Type /Page") - content.count("/Type /Pages")


def export_pdf(
    quote: QuoteResponse,
    project: ProjectInput,
    output_path: Optional[Union[str, Path]] = None,
    theme: str = "light",
    tolerance: Optional[float] = None,
) -> ExportResult:
    """
    Export the quote to a PDF file.

    Args:
        quote: Quote to export
        project: Input the quote was generated from (used for the file name)
        output_path: Destination; defaults to ``cotizacion-<name>.pdf`` in the
            current directory
        theme: "light" or "dark"
        tolerance: Breakdown mismatch tolerance; defaults to the configured one

    Returns:
        ExportResult describing the written file

    Raises:
        ExportError: If the PDF library is unavailable or writing fails
    """
    start_time = time.perf_counter()
    output_file = Path(output_path) if output_path else Path(project.export_filename())

    logger.info("pdf_export_started", output_path=str(output_file), theme=theme)

    html_content = render_html(quote, project, theme=theme, tolerance=tolerance)
    pdf_bytes = _html_to_pdf(html_content)

    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_bytes(pdf_bytes)
    except OSError as e:
        logger.error(
            "pdf_export_error",
            output_path=str(output_file),
            error=str(e),
            error_type=type(e).__name__,
        )
        raise ExportError(
            f"Could not write {output_file}: {e}",
            details={"output_path": str(output_file)},
        ) from e

    page_count = max(_count_pdf_pages(pdf_bytes), 1)
    file_size_bytes = len(pdf_bytes)
    duration_ms = (time.perf_counter() - start_time) * 1000

    logger.info(
        "pdf_exported",
        output_path=str(output_file),
        page_count=page_count,
        file_size_kb=round(file_size_bytes / 1024, 2),
        duration_ms=round(duration_ms, 2),
    )

    return ExportResult(
        output_path=str(output_file.absolute()),
        page_count=page_count,
        file_size_bytes=file_size_bytes,
        generated_at=datetime.now().isoformat(),
    )
