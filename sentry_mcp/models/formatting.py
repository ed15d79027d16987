from enum import Enum

from pydantic import BaseModel, ConfigDict


class OutputFormat(str, Enum):
    MARKDOWN = "markdown"
    PLAIN = "plain"


class ViewType(str, Enum):
    SUMMARY = "summary"
    DETAILED = "detailed"


class FormatOptions(BaseModel):
    """Output format and detail level for a single render call"""

    model_config = ConfigDict(frozen=True)

    format: OutputFormat = OutputFormat.MARKDOWN
    view: ViewType = ViewType.DETAILED
