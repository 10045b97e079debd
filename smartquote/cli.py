"""
Command line entry point for SmartQuote.

Fills the quote form from arguments, attaches reference files, requests a
quote and prints it (or its raw JSON), optionally exporting a PDF.

Usage:
  export OPENAI_API_KEY=sk-...
  smartquote --name "Shoe Store" --type "E-commerce / Tienda" \\
      --description "Catalog, cart, Stripe checkout" \\
      --file flow.json --file wireframe.png --pdf quote.pdf
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from smartquote.config.errors import ExportError, QuoteError, ValidationError
from smartquote.config.settings import settings
from smartquote.logging_config import configure_logging
from smartquote.models.project_input import ProjectInput, ProjectType
from smartquote.services.pdf_generator import export_pdf
from smartquote.services.presentation import THEMES, render_text
from smartquote.session import QuoteSession, SessionState
from smartquote.utils.quote_logger import (
    log_export_complete,
    log_quote_failed,
    log_request_start,
)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    defaults = ProjectInput()
    parser = argparse.ArgumentParser(
        prog="smartquote",
        description="Generate an AI-assisted software project quote",
    )
    parser.add_argument("--name", default="", help="Project name")
    parser.add_argument("--type", dest="project_type", default=defaults.project_type,
                        help="Project type (see --list-types)")
    parser.add_argument("--description", default="", help="Key features, users, integrations")
    parser.add_argument("--team-size", default=str(defaults.team_size), help="People on the team")
    parser.add_argument("--hourly-rate", default=str(defaults.hourly_rate), help="Blended USD rate per hour")
    parser.add_argument("--hours-per-day", default=str(defaults.hours_per_day), help="Working hours per day")
    parser.add_argument("--weeks", default=str(defaults.estimated_weeks), help="Estimated weeks")
    parser.add_argument("--server-cost", default=str(defaults.server_cost), help="Monthly server/cloud USD")
    parser.add_argument("--target-cost", default="", help="Manual total that overrides computed pricing")
    parser.add_argument("--file", dest="files", action="append", default=[],
                        help="Reference image or JSON flow file (repeatable)")
    parser.add_argument("--json", action="store_true", help="Print the raw quote JSON")
    parser.add_argument("--pdf", metavar="PATH", nargs="?", const="",
                        help="Export the quote to PDF (default name from the project)")
    parser.add_argument("--theme", choices=sorted(THEMES), default="light", help="PDF theme")
    parser.add_argument("--list-types", action="store_true", help="List project types and exit")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level")
    return parser


def _project_from_args(args: argparse.Namespace) -> ProjectInput:
    return ProjectInput(
        project_name=args.name,
        project_type=args.project_type,
        description=args.description,
        team_size=args.team_size,
        hourly_rate=args.hourly_rate,
        hours_per_day=args.hours_per_day,
        estimated_weeks=args.weeks,
        server_cost=args.server_cost,
        target_cost=args.target_cost,
    )


async def run(args: argparse.Namespace, session: Optional[QuoteSession] = None) -> int:
    """Run one quote request described by parsed arguments."""
    session = session or QuoteSession()
    session.project = _project_from_args(args)

    try:
        session.project.validate_for_submission()
    except ValidationError as e:
        log_quote_failed(e.code, e.message, e.details)
        return EXIT_INVALID

    if args.files:
        await session.add_paths(args.files)

    log_request_start(
        session.project.project_name,
        session.project.project_type,
        [f.name for f in session.files],
        session.project.target_cost_value,
    )

    state = await session.submit()
    if state != SessionState.RESULT_SHOWN:
        log_quote_failed("QUOTE_FAILED", session.error or "Unknown error")
        return EXIT_FAILED

    quote = session.result
    tolerance = settings.breakdown_tolerance
    if args.json:
        print(json.dumps(quote.to_wire_dict(), indent=2, ensure_ascii=False))
    else:
        print(render_text(quote, session.project, tolerance=tolerance))

    if args.pdf is not None:
        try:
            result = export_pdf(
                quote, session.project, args.pdf or None, theme=args.theme, tolerance=tolerance
            )
        except ExportError as e:
            log_quote_failed(e.code, e.message, e.details)
            return EXIT_FAILED
        log_export_complete(result.output_path, result.page_count, result.file_size_bytes)

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_types:
        for project_type in ProjectType:
            print(project_type.value)
        return EXIT_OK

    configure_logging(args.log_level)
    try:
        return asyncio.run(run(args))
    except QuoteError as e:
        log_quote_failed(e.code, e.message, e.details)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
