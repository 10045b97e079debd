"""Services for SmartQuote: ingestion, request building, generation, presentation, export."""
