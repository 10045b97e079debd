"""Console banners for SmartQuote runs.

Prints formatted, easy-to-spot markers for the CLI alongside the
structured log events.
"""

import json
import sys
import structlog
from typing import Dict, Any, List, Optional, TextIO
from datetime import datetime

logger = structlog.get_logger(__name__)

# Visual markers for different log types
BANNER_WIDTH = 80
REQUEST_BANNER_CHAR = "═"
EXPORT_BANNER_CHAR = "─"
ERROR_BANNER_CHAR = "!"


def _create_banner(char: str, text: str, width: int = BANNER_WIDTH) -> str:
    """Create a centered banner with given character."""
    text_with_spaces = f" {text} "
    padding = (width - len(text_with_spaces)) // 2
    return char * padding + text_with_spaces + char * (width - padding - len(text_with_spaces))


def _format_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format dictionary as pretty JSON string."""
    try:
        return json.dumps(data, indent=indent, default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(data)


def log_request_start(
    project_name: str,
    project_type: str,
    file_names: List[str],
    target_cost: Optional[float] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Announce a quote request."""
    out = stream or sys.stderr
    timestamp = datetime.now().isoformat(timespec="seconds")

    print(REQUEST_BANNER_CHAR * BANNER_WIDTH, file=out)
    print(_create_banner(REQUEST_BANNER_CHAR, "▶ REQUESTING QUOTE"), file=out)
    print(REQUEST_BANNER_CHAR * BANNER_WIDTH, file=out)
    print(f"║ Project     : {project_name}", file=out)
    print(f"║ Type        : {project_type}", file=out)
    print(f"║ Timestamp   : {timestamp}", file=out)
    print(f"║ Attachments : {', '.join(file_names) if file_names else 'None'}", file=out)
    if target_cost:
        print(f"║ Target cost : ${target_cost:,}", file=out)
    print(REQUEST_BANNER_CHAR * BANNER_WIDTH, file=out)

    logger.debug("request_start_logged", project_name=project_name, files=len(file_names))


def log_quote_failed(code: str, message: str, details: Optional[Dict[str, Any]] = None,
                     stream: Optional[TextIO] = None) -> None:
    """Show a failed request or export as a single blocking notice."""
    out = stream or sys.stderr

    print(ERROR_BANNER_CHAR * BANNER_WIDTH, file=out)
    print(_create_banner(ERROR_BANNER_CHAR, "✗ QUOTE FAILED"), file=out)
    print(ERROR_BANNER_CHAR * BANNER_WIDTH, file=out)
    print(f"║ Code    : {code}", file=out)
    print(f"║ Message : {message}", file=out)
    if details:
        for line in _format_json(details).split("\n"):
            print(f"  {line}", file=out)
    print(ERROR_BANNER_CHAR * BANNER_WIDTH, file=out)


def log_export_complete(output_path: str, page_count: int, file_size_bytes: int,
                        stream: Optional[TextIO] = None) -> None:
    """Confirm a written PDF."""
    out = stream or sys.stderr

    print(EXPORT_BANNER_CHAR * BANNER_WIDTH, file=out)
    print(_create_banner(EXPORT_BANNER_CHAR, "✓ PDF EXPORTED"), file=out)
    print(f"║ File  : {output_path}", file=out)
    print(f"║ Pages : {page_count}", file=out)
    print(f"║ Size  : {file_size_bytes / 1024:,.1f} KB", file=out)
    print(EXPORT_BANNER_CHAR * BANNER_WIDTH, file=out)
