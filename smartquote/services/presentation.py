"""Quote presentation.

Turns a QuoteResponse into display data: summary cards, chart series,
table rows and rendered text/HTML. Nothing here computes prices; the only
arithmetic is unit formatting.
"""

import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape

from smartquote.config.settings import settings
from smartquote.models.project_input import ProjectInput
from smartquote.models.quote import QuoteResponse

logger = structlog.get_logger(__name__)

# Template directory
TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

CHART_COLORS = ["#8b5cf6", "#3b82f6", "#06b6d4", "#10b981", "#f59e0b", "#ec4899"]

THEMES = {
    "light": {
        "background": "#f8fafc",
        "surface": "#ffffff",
        "text": "#0f172a",
        "muted": "#64748b",
        "border": "#e2e8f0",
        "accent": "#7c3aed",
    },
    "dark": {
        "background": "#0f172a",
        "surface": "#1e293b",
        "text": "#f1f5f9",
        "muted": "#94a3b8",
        "border": "#334155",
        "accent": "#a78bfa",
    },
}

PREMIUM_LABEL = "Premium / Agency"


def format_currency(value: float) -> str:
    """Format a USD amount with thousands separators: ``$12,345``."""
    if float(value).is_integer():
        return f"${int(value):,}"
    return f"${value:,.2f}"


def days_to_weeks(days: float) -> int:
    """Convert a day count to whole weeks."""
    return int(math.floor(days / 7 + 0.5))


def summary_cards(quote: QuoteResponse) -> List[Dict[str, str]]:
    """Headline metrics shown above the charts."""
    return [
        {"label": "Total Investment", "value": format_currency(quote.total_estimated_cost)},
        {"label": "MVP Cost", "value": format_currency(quote.mvp_cost)},
        {"label": "Critical Infrastructure", "value": format_currency(quote.infrastructure_critical_cost)},
        {
            "label": "Market Average Delivery",
            "value": f"{days_to_weeks(quote.market_comparison.average_days)} weeks",
        },
    ]


def category_chart_data(quote: QuoteResponse) -> List[Dict[str, Any]]:
    """Series for the category breakdown chart."""
    return [
        {
            "name": item.category,
            "value": item.cost,
            "color": CHART_COLORS[index % len(CHART_COLORS)],
        }
        for index, item in enumerate(quote.breakdown)
    ]


def comparison_chart_data(
    quote: QuoteResponse,
    company_name: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Series for the market comparison chart: our total vs. premium agencies."""
    return [
        {"name": company_name or settings.company_name, "amount": quote.total_estimated_cost},
        {"name": PREMIUM_LABEL, "amount": quote.market_comparison.high_estimate},
    ]


def breakdown_rows(quote: QuoteResponse) -> List[Dict[str, str]]:
    """Line-item table rows with formatted costs."""
    total = quote.total_estimated_cost
    rows = []
    for item in quote.breakdown:
        share = (item.cost / total * 100) if total else 0.0
        rows.append({
            "category": item.category,
            "description": item.description,
            "cost": format_currency(item.cost),
            "share": f"{share:.0f}%",
        })
    return rows


def email_draft(quote: QuoteResponse) -> str:
    """The editable, copyable email draft."""
    return quote.client_email_draft


def build_view(
    quote: QuoteResponse,
    project: Optional[ProjectInput] = None,
    theme: str = "light",
    company_name: Optional[str] = None,
    tolerance: Optional[float] = None,
) -> Dict[str, Any]:
    """Build the context shared by the text and HTML renderers.

    ``tolerance`` defaults to the configured breakdown tolerance; callers
    that generated the quote with an injected config pass theirs.
    """
    if theme not in THEMES:
        raise ValueError(f"Unknown theme {theme!r}; expected one of {sorted(THEMES)}")

    company_name = company_name or settings.company_name
    if tolerance is None:
        tolerance = settings.breakdown_tolerance
    mismatch = quote.breakdown_mismatch(tolerance)
    market = quote.market_comparison

    chart = category_chart_data(quote)
    chart_total = sum(entry["value"] for entry in chart) or 1
    for entry in chart:
        entry["percent"] = round(entry["value"] / chart_total * 100, 1)

    comparison = comparison_chart_data(quote, company_name)
    comparison_max = max((entry["amount"] for entry in comparison), default=0) or 1
    for entry in comparison:
        entry["percent"] = round(entry["amount"] / comparison_max * 100, 1)
        entry["formatted"] = format_currency(entry["amount"])

    return {
        "company_name": company_name,
        "report_date": datetime.now().strftime("%B %d, %Y"),
        "theme": THEMES[theme],
        "theme_name": theme,
        "project_type": project.project_type if project else None,
        "title": quote.project_title,
        "executive_summary": quote.executive_summary,
        "total": format_currency(quote.total_estimated_cost),
        "cards": summary_cards(quote),
        "category_chart": chart,
        "comparison_chart": comparison,
        "market": {
            "low": format_currency(market.low_estimate),
            "high": format_currency(market.high_estimate),
            "weeks": days_to_weeks(market.average_days),
            "trend": market.market_trend,
        },
        "rows": breakdown_rows(quote),
        "breakdown_total": format_currency(quote.breakdown_total()),
        "breakdown_mismatch": format_currency(mismatch) if mismatch is not None else None,
        "recommendations": list(quote.technical_recommendations),
        "email_draft": email_draft(quote),
    }


def _get_jinja_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
    )


def render_html(
    quote: QuoteResponse,
    project: Optional[ProjectInput] = None,
    theme: str = "light",
    company_name: Optional[str] = None,
    tolerance: Optional[float] = None,
) -> str:
    """Render the quote region as a standalone HTML document."""
    template = _get_jinja_env().get_template("quote_report.html")
    return template.render(**build_view(quote, project, theme, company_name, tolerance))


def render_text(
    quote: QuoteResponse,
    project: Optional[ProjectInput] = None,
    company_name: Optional[str] = None,
    width: int = 80,
    tolerance: Optional[float] = None,
) -> str:
    """Render the quote for a terminal."""
    view = build_view(quote, project, company_name=company_name, tolerance=tolerance)
    rule = "─" * width
    lines = [
        rule,
        view["title"],
    ]
    if view["project_type"]:
        lines.append(f"[{view['project_type']}]")
    lines += [rule, view["executive_summary"], ""]

    for card in view["cards"]:
        lines.append(f"  {card['label']:<26} {card['value']:>16}")

    lines += ["", "Cost by category"]
    for entry in view["category_chart"]:
        bar = "█" * max(1, int(entry["percent"] / 100 * 30)) if entry["value"] else ""
        lines.append(f"  {entry['name'][:24]:<24} {bar:<30} {entry['percent']:>5.1f}%")

    lines += ["", "Market comparison"]
    for entry in view["comparison_chart"]:
        bar = "█" * max(1, int(entry["percent"] / 100 * 30)) if entry["amount"] else ""
        lines.append(f"  {entry['name'][:24]:<24} {bar:<30} {entry['formatted']:>12}")
    lines.append(f"  Market range: {view['market']['low']} - {view['market']['high']}")
    lines.append(f"  {view['market']['trend']}")

    lines += ["", "Breakdown"]
    for row in view["rows"]:
        lines.append(f"  {row['category'][:40]:<40} {row['cost']:>14}")
        if row["description"]:
            lines.append(f"      {row['description']}")
    lines.append(f"  {'Total':<40} {view['total']:>14}")
    if view["breakdown_mismatch"]:
        lines.append(
            f"  ! Items add up to {view['breakdown_total']} "
            f"({view['breakdown_mismatch']} off the total)"
        )

    if view["recommendations"]:
        lines += ["", "Technical recommendations"]
        lines += [f"  - {rec}" for rec in view["recommendations"]]

    lines += ["", "Email draft", rule, view["email_draft"], rule]
    return "\n".join(lines)
