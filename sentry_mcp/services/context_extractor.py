"""
Extraction of caller-selected fields from a batch of Sentry events
"""

import json
import logging
from collections.abc import Callable
from typing import Any

from sentry_mcp.models.sentry import ExtractionResult

logger = logging.getLogger(__name__)

MISSING = object()

Source = Callable[[dict[str, Any]], Any]

# Resolution order: the first source defining the field wins
FIELD_SOURCES: list[tuple[str, Source]] = [
    ("contexts", lambda event: event.get("contexts")),
    ("extra", lambda event: event.get("extra")),
    ("context", lambda event: event.get("context")),
    ("event", lambda event: event),
]


def resolve_field(event: dict[str, Any], field: str) -> Any:
    """Value of ``field`` from the first source that defines it, else MISSING"""
    for _, source in FIELD_SOURCES:
        data = source(event)
        if isinstance(data, dict) and field in data:
            return data[field]
    return MISSING


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, sort_keys=True, default=str)


def extract_context_data(
    events: list[dict[str, Any]], fields: list[str]
) -> ExtractionResult:
    """Collect the requested fields from every event.

    Events resolving none of the fields are left out of ``extracted_data``
    but still count towards ``total_events``.
    """
    extracted_data: list[dict[str, Any]] = []
    unique_values: dict[str, set[str]] = {field: set() for field in fields}

    for event in events:
        resolved: dict[str, Any] = {}
        for field in fields:
            if field in resolved:
                continue
            value = resolve_field(event, field)
            if value is MISSING:
                continue
            resolved[field] = value
            unique_values[field].add(stringify(value))

        if resolved:
            record = {"event_id": event.get("id"), "timestamp": event.get("dateCreated")}
            record.update(resolved)
            extracted_data.append(record)

    logger.debug(
        f"Extracted {len(fields)} fields from {len(extracted_data)}/{len(events)} events"
    )

    return ExtractionResult(
        extracted_data=extracted_data,
        unique_values={field: sorted(values) for field, values in unique_values.items()},
        total_events=len(events),
        events_with_data=len(extracted_data),
    )
