"""SmartQuote - AI-assisted software project quotes.

Collects project parameters and reference files, asks a hosted language
model for a structured cost estimate, and renders the result as a
shareable quote (terminal, HTML or PDF).

Architecture:
- models: ProjectInput, UploadedFile, QuoteResponse
- services: file ingestion, request builder, LLM client, presentation, PDF export
- session: in-memory form session with explicit state transitions
"""

__version__ = "1.0.0"
