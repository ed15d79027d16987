"""
Sentry models for context extraction and resource references
"""

from typing import Any

from pydantic import BaseModel


class SentryUrlReference(BaseModel):
    """Identifiers recovered from a bare issue ID or a Sentry issue URL"""

    organization_slug: str
    issue_id: str
    event_id: str | None = None


class ExtractionResult(BaseModel):
    """Field values extracted from a batch of events"""

    extracted_data: list[dict[str, Any]] = []
    unique_values: dict[str, list[str]] = {}
    total_events: int = 0
    events_with_data: int = 0
