"""Quote request builder.

Composes the instruction text from a ProjectInput and attaches uploaded
files as multimodal content blocks for the generator call.
"""

import json
import mimetypes
from typing import Any, Dict, List, Optional, Sequence

import structlog
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from smartquote.config.errors import FileDecodeError
from smartquote.config.settings import settings
from smartquote.models.project_input import ProjectInput
from smartquote.models.quote import response_schema
from smartquote.models.uploaded_file import UploadedFile

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = """You produce software project quotes as structured data.

IMPORTANT: You MUST respond with valid JSON only. No markdown, no explanation, just JSON.
The JSON must follow this schema exactly (all listed fields are required):

{schema}"""


def _fmt(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def build_prompt_text(
    project: ProjectInput,
    company_name: Optional[str] = None,
    language: Optional[str] = None,
) -> str:
    """Compose the instruction text for a quote request.

    Deterministic for a given input. With a target cost above zero the
    generator is told to hit that exact total; otherwise it is given the
    effort formula and a discretionary contingency margin.
    """
    company_name = company_name or settings.company_name
    language = language or settings.quote_language

    text = f"""
Act as a Senior Solutions Architect and Software Estimation Expert at {company_name}.
Produce a detailed quote for the following project:

Name: {project.project_name}
Type: {project.project_type}
Description: {project.description}

Resources and Timeline:
- Team size: {_fmt(project.team_size)} people
- Average cost per hour (blended rate): ${_fmt(project.hourly_rate)} USD
- Working hours per day: {_fmt(project.hours_per_day)}
- Estimated weeks: {_fmt(project.estimated_weeks)}

Fixed Costs / Infrastructure:
- Estimated server/cloud budget: ${_fmt(project.server_cost)} USD / month

Special Instructions:
1. Analyze the attached images (diagrams, screenshots) and the content of the JSON flow files.
"""

    if project.has_target_cost:
        target = _fmt(project.target_cost_value)
        text += f"""
ATTENTION - FIXED PRICE DEFINED:
The user has set a MANUAL / TARGET COST of: ${target}.
Use this EXACT value as the 'totalEstimatedCost'.
Adjust the category breakdown (backend, frontend, etc.) so that the sum matches this total of ${target},
respecting the inferred proportion of technical effort but forcing the math to reach this number.
"""
    else:
        text += """
Cost Calculation:
Calculate the total cost based purely on (People * Hours per day * Days * Weeks * Rate).
Add a safety margin (10-20%) if you detect high complexity in the diagrams.
"""

    text += f"""
Additional output requirements:
- Calculate the MVP (Minimum Viable Product) by removing non-essential features.
- Provide a market comparison (benchmarking).
- Break the costs down into clear categories.
- Write every client-facing text (summary, recommendations, email) in {language}.

Respond strictly in JSON format according to the schema.
"""
    return text


def _image_mime_type(file: UploadedFile) -> str:
    if file.mime_type.startswith("image/"):
        return file.mime_type
    guessed, _ = mimetypes.guess_type(file.name)
    return guessed if guessed and guessed.startswith("image/") else "image/png"


def build_content_parts(
    project: ProjectInput,
    files: Sequence[UploadedFile],
    company_name: Optional[str] = None,
    language: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Build the multimodal content blocks for the human message.

    Images are attached inline; JSON flow files have their decoded text
    appended as labeled blocks. Files that fail to decode are skipped.
    """
    parts: List[Dict[str, Any]] = [
        {"type": "text", "text": build_prompt_text(project, company_name, language)}
    ]

    for file in files:
        payload = file.base64_payload
        if file.is_image:
            if payload:
                parts.append({
                    "type": "image_url",
                    "image_url": {"url": f"data:{_image_mime_type(file)};base64,{payload}"},
                })
            else:
                logger.warning("image_payload_empty", file_name=file.name)
        elif file.is_json:
            try:
                content = file.decode_text()
            except FileDecodeError as e:
                logger.warning("file_decode_failed", file_name=file.name, error=e.message)
                continue
            parts.append({
                "type": "text",
                "text": (
                    f"\n--- FLOW FILE CONTENT ({file.name}) ---\n"
                    f"{content}\n"
                    f"--- END OF FILE ---\n"
                ),
            })
        else:
            logger.info("file_ignored", file_name=file.name, mime_type=file.mime_type)

    return parts


def build_system_prompt() -> str:
    """System prompt carrying the JSON-only instruction and declared schema."""
    return SYSTEM_PROMPT.format(
        schema=json.dumps(response_schema(), indent=2, ensure_ascii=False)
    )


def build_messages(
    project: ProjectInput,
    files: Sequence[UploadedFile],
    company_name: Optional[str] = None,
    language: Optional[str] = None,
) -> List[BaseMessage]:
    """Build the full message list for a quote request."""
    parts = build_content_parts(project, files, company_name, language)
    logger.debug(
        "quote_request_built",
        parts=len(parts),
        images=sum(1 for p in parts if p["type"] == "image_url"),
        has_target_cost=project.has_target_cost,
    )
    return [
        SystemMessage(content=build_system_prompt()),
        HumanMessage(content=parts),
    ]
