"""
Shared base for Sentry report formatters
"""

from datetime import UTC, datetime
from typing import Any

from sentry_mcp.formatters.markup import Markup
from sentry_mcp.models.formatting import FormatOptions, OutputFormat, ViewType


def value_or(value: Any, default: str = "N/A") -> str:
    """Render a possibly missing value, substituting a placeholder"""
    if value is None or value == "":
        return default
    return str(value)


def epoch_to_iso(timestamp: int | float) -> str:
    """Convert epoch seconds to an ISO-8601 UTC string with milliseconds"""
    moment = datetime.fromtimestamp(timestamp, UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BaseFormatter:
    def __init__(self, options: FormatOptions | None = None):
        self.options = options or FormatOptions()
        self.markup = Markup(self.options.format)

    def is_markdown(self) -> bool:
        return self.options.format == OutputFormat.MARKDOWN

    def is_detailed(self) -> bool:
        return self.options.view == ViewType.DETAILED

    def field(self, label: str, value: Any, default: str = "N/A") -> str:
        return f"{self.markup.bold(label)}: {value_or(value, default)}"

    def format_tags(self, tags: list[dict[str, Any]]) -> str:
        """Tags as a key/value table in markdown, one line each in plain text"""
        if self.is_markdown():
            rows = [[tag.get("key"), tag.get("value")] for tag in tags]
            return self.markup.table(["Key", "Value"], rows)

        output = ""
        for tag in tags:
            output += f"{tag.get('key')}: {tag.get('value')}\n"
        return output + "\n"

    def format_stats_breakdown(self, buckets: list[list[Any]]) -> str:
        """Per-bucket timestamp/count breakdown of time-series stats"""
        if self.is_markdown():
            rows = [[epoch_to_iso(timestamp), count] for timestamp, count in buckets]
            return self.markup.table(["Timestamp", "Count"], rows)

        output = ""
        for timestamp, count in buckets:
            output += f"{epoch_to_iso(timestamp)}: {count}\n"
        return output + "\n"

    @staticmethod
    def stats_24h(entity: dict[str, Any]) -> list[list[Any]]:
        stats = entity.get("stats") or {}
        return stats.get("24h") or []
