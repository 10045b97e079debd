"""Tests for the quote request builder."""

import json

from langchain_core.messages import HumanMessage, SystemMessage

from smartquote.models.uploaded_file import UploadedFile
from smartquote.services.prompt_builder import (
    build_content_parts,
    build_messages,
    build_prompt_text,
    build_system_prompt,
)


class TestBuildPromptText:
    """Tests for the instruction text."""

    def test_project_fields_included(self, sample_project_input, mock_settings):
        text = build_prompt_text(sample_project_input.coerced())

        assert "Senior Solutions Architect" in text
        assert "Smart Bytes" in text
        assert "Name: Shoe Store" in text
        assert "Type: E-commerce / Tienda" in text
        assert "Team size: 2 people" in text
        assert "(blended rate): $35 USD" in text
        assert "Working hours per day: 6" in text
        assert "Estimated weeks: 8" in text
        assert "$50 USD / month" in text
        assert "in Spanish" in text

    def test_formula_without_target_cost(self, sample_project_input, mock_settings):
        text = build_prompt_text(sample_project_input)

        assert "(People * Hours per day * Days * Weeks * Rate)" in text
        assert "(10-20%)" in text
        assert "TARGET COST" not in text

    def test_target_cost_forces_total(self, sample_project_input, mock_settings):
        project = sample_project_input.model_copy(update={"target_cost": "12000"})

        text = build_prompt_text(project)

        assert "MANUAL / TARGET COST of: $12000" in text
        assert "Use this EXACT value as the 'totalEstimatedCost'" in text
        assert "matches this total of $12000" in text
        assert "(People * Hours per day" not in text

    def test_zero_target_cost_uses_formula(self, sample_project_input, mock_settings):
        project = sample_project_input.model_copy(update={"target_cost": "0"})

        assert "(People * Hours per day" in build_prompt_text(project)

    def test_deterministic(self, sample_project_input, mock_settings):
        assert build_prompt_text(sample_project_input) == build_prompt_text(sample_project_input)

    def test_branding_overrides(self, sample_project_input):
        text = build_prompt_text(sample_project_input, company_name="Acme Labs", language="English")

        assert "Expert at Acme Labs" in text
        assert "in English" in text


class TestBuildContentParts:
    """Tests for multimodal attachments."""

    def test_no_files(self, sample_project_input, mock_settings):
        parts = build_content_parts(sample_project_input, [])

        assert len(parts) == 1
        assert parts[0]["type"] == "text"

    def test_image_attached_inline(self, sample_project_input, png_file, mock_settings):
        parts = build_content_parts(sample_project_input, [png_file])

        assert parts[1]["type"] == "image_url"
        assert parts[1]["image_url"]["url"] == f"data:image/png;base64,{png_file.base64_payload}"

    def test_image_without_mime_type_defaults_to_png(self, sample_project_input, png_file, mock_settings):
        untyped = UploadedFile(name="capture.png", mime_type="", data=png_file.data)

        parts = build_content_parts(sample_project_input, [untyped])

        assert parts[1]["image_url"]["url"].startswith("data:image/png;base64,")

    def test_empty_image_payload_skipped(self, sample_project_input, mock_settings):
        empty = UploadedFile(name="blank.png", mime_type="image/png", data="data:image/png;base64,")

        parts = build_content_parts(sample_project_input, [empty])

        assert len(parts) == 1

    def test_json_content_appended_as_text(self, sample_project_input, json_file,
                                           flow_json_content, mock_settings):
        parts = build_content_parts(sample_project_input, [json_file])

        block = parts[1]["text"]
        assert parts[1]["type"] == "text"
        assert "--- FLOW FILE CONTENT (flow.json) ---" in block
        assert "--- END OF FILE ---" in block
        assert json.dumps(flow_json_content) in block

    def test_undecodable_file_skipped(self, sample_project_input, json_file, mock_settings):
        broken = UploadedFile(name="broken.json", mime_type="application/json",
                              data="data:application/json;base64,%%%")

        parts = build_content_parts(sample_project_input, [broken, json_file])

        assert len(parts) == 2
        assert "(flow.json)" in parts[1]["text"]

    def test_other_types_ignored(self, sample_project_input, mock_settings):
        notes = UploadedFile.from_bytes("notes.txt", b"hello", "text/plain")

        parts = build_content_parts(sample_project_input, [notes])

        assert len(parts) == 1

    def test_mixed_files_keep_attachment_order(self, sample_project_input, png_file,
                                               json_file, mock_settings):
        parts = build_content_parts(sample_project_input, [json_file, png_file])

        assert [p["type"] for p in parts] == ["text", "text", "image_url"]


class TestBuildMessages:
    """Tests for the full message list."""

    def test_system_prompt_declares_schema(self):
        prompt = build_system_prompt()

        assert "valid JSON only" in prompt
        for key in ("projectTitle", "totalEstimatedCost", "breakdown",
                    "marketComparison", "clientEmailDraft"):
            assert key in prompt

    def test_messages(self, sample_project_input, png_file, mock_settings):
        messages = build_messages(sample_project_input, [png_file])

        assert len(messages) == 2
        assert isinstance(messages[0], SystemMessage)
        assert isinstance(messages[1], HumanMessage)
        assert isinstance(messages[1].content, list)
        assert messages[1].content[1]["type"] == "image_url"
