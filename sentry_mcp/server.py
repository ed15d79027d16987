import json
import logging
from typing import Annotated, Literal

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult
from pydantic import Field

from sentry_mcp.formatters.issue_formatter import IssueFormatter
from sentry_mcp.formatters.project_formatter import ProjectFormatter
from sentry_mcp.models.config import AppConfig
from sentry_mcp.models.formatting import FormatOptions
from sentry_mcp.services.context_extractor import extract_context_data
from sentry_mcp.services.sentry_client import SentryApiClient, SentryNotFoundError
from sentry_mcp.utils.error_handler import ErrorHandler, text_result
from sentry_mcp.utils.url_parser import parse_issue_reference

logger = logging.getLogger(__name__)

View = Annotated[
    Literal["summary", "detailed"], Field(description="View type (default: detailed)")
]
Format = Annotated[
    Literal["plain", "markdown"], Field(description="Output format (default: markdown)")
]
OrganizationSlug = Annotated[
    str, Field(description="The slug of the organization the resource belongs to")
]

TOOL_DESCRIPTIONS = {
    "list_projects": "List accessible Sentry projects. View project slugs, IDs, status, settings, features, and organization details.",
    "list_project_issues": "List issues from a Sentry project. Monitor issue status, severity, frequency, and timing.",
    "get_sentry_issue": "Retrieve and analyze a Sentry issue. Accepts issue URL or ID.",
    "list_issue_events": "List events for a specific Sentry issue. Analyze event details, metadata, and patterns.",
    "resolve_short_id": "Retrieve details about an issue using its short ID. Maps short IDs to issue details, project context, and status.",
    "extract_issue_context_data": "Extract selected fields from the additional context of every event of an issue in a single request.",
    "get_sentry_event": "Retrieve a specific Sentry event from an issue. Requires issue ID/URL and event ID. For URLs with events, event_id can be extracted automatically.",
    "find_sentry_event": "Look up a Sentry event by its event ID alone, without knowing the issue it belongs to.",
}


def _missing_arguments(**values: str) -> list[str]:
    return [name for name, value in values.items() if not value or not value.strip()]


class SentryMCPServer:
    """MCP server exposing Sentry projects, issues and events as tools"""

    def __init__(self, config: AppConfig, client: SentryApiClient | None = None):
        self.config = config
        self.client = client or SentryApiClient(config.sentry)
        self.mcp = FastMCP(config.server_name)
        self._register_tools()

    def _register_tools(self):
        for name, description in TOOL_DESCRIPTIONS.items():
            self.mcp.tool(
                name=name, description=description, structured_output=False
            )(getattr(self, name))
        logger.info(f"Registered {len(TOOL_DESCRIPTIONS)} Sentry tools")

    async def start(self):
        logger.info(f"Sentry MCP server running against {self.config.sentry.host}")
        await self.mcp.run_stdio_async()

    async def list_projects(
        self,
        organization_slug: Annotated[
            str, Field(description="The slug of the organization to list projects from")
        ],
        view: View = "detailed",
        format: Format = "markdown",
    ) -> CallToolResult:
        if missing := _missing_arguments(organization_slug=organization_slug):
            return ErrorHandler.handle_validation_error(f"{', '.join(missing)} is required")

        try:
            projects = await self.client.get_projects(organization_slug)
        except SentryNotFoundError:
            return ErrorHandler.handle_not_found_error("Organization", organization_slug)
        except Exception as e:
            return ErrorHandler.handle_api_error(e, "list_projects")

        formatter = ProjectFormatter(FormatOptions(format=format, view=view))
        return text_result(formatter.format_projects(projects))

    async def list_project_issues(
        self,
        organization_slug: OrganizationSlug,
        project_slug: Annotated[
            str, Field(description="The slug of the project to list issues from")
        ],
        query: Annotated[
            str | None, Field(description="Optional Sentry search query, e.g. is:unresolved")
        ] = None,
        view: View = "detailed",
        format: Format = "markdown",
    ) -> CallToolResult:
        if missing := _missing_arguments(
            organization_slug=organization_slug, project_slug=project_slug
        ):
            return ErrorHandler.handle_validation_error(f"{', '.join(missing)} is required")

        try:
            issues = await self.client.get_project_issues(
                organization_slug, project_slug, query
            )
        except SentryNotFoundError:
            return ErrorHandler.handle_not_found_error("Project", project_slug)
        except Exception as e:
            return ErrorHandler.handle_api_error(e, "list_project_issues")

        formatter = IssueFormatter(FormatOptions(format=format, view=view))
        return text_result(formatter.format_issue_list(issues, project_slug))

    async def get_sentry_issue(
        self,
        issue_id_or_url: Annotated[
            str,
            Field(description="Either a full Sentry issue URL or just the numeric issue ID"),
        ],
        organization_slug: OrganizationSlug,
        view: View = "detailed",
        format: Format = "markdown",
    ) -> CallToolResult:
        try:
            reference = parse_issue_reference(issue_id_or_url, organization_slug)
        except ValueError as e:
            return ErrorHandler.handle_validation_error(str(e))
        if missing := _missing_arguments(organization_slug=reference.organization_slug):
            return ErrorHandler.handle_validation_error(f"{', '.join(missing)} is required")

        try:
            issue = await self.client.get_issue(
                reference.organization_slug, reference.issue_id
            )
        except SentryNotFoundError:
            return ErrorHandler.handle_not_found_error("Issue", reference.issue_id)
        except Exception as e:
            return ErrorHandler.handle_api_error(e, "get_sentry_issue")

        formatter = IssueFormatter(FormatOptions(format=format, view=view))
        return text_result(formatter.format_issue_details(issue))

    async def list_issue_events(
        self,
        organization_slug: OrganizationSlug,
        issue_id: Annotated[str, Field(description="The ID of the issue to list events for")],
        view: View = "detailed",
        format: Format = "markdown",
    ) -> CallToolResult:
        if missing := _missing_arguments(
            organization_slug=organization_slug, issue_id=issue_id
        ):
            return ErrorHandler.handle_validation_error(f"{', '.join(missing)} is required")

        try:
            events = await self.client.get_issue_events(organization_slug, issue_id)
        except SentryNotFoundError:
            return ErrorHandler.handle_not_found_error("Issue", issue_id)
        except Exception as e:
            return ErrorHandler.handle_api_error(e, "list_issue_events")

        formatter = IssueFormatter(FormatOptions(format=format, view=view))
        return text_result(formatter.format_event_list(events, f"Issue {issue_id}"))

    async def resolve_short_id(
        self,
        organization_slug: OrganizationSlug,
        short_id: Annotated[
            str,
            Field(description="The short ID of the issue to resolve (e.g., PROJECT-123)"),
        ],
        format: Format = "markdown",
    ) -> CallToolResult:
        if missing := _missing_arguments(
            organization_slug=organization_slug, short_id=short_id
        ):
            return ErrorHandler.handle_validation_error(f"{', '.join(missing)} is required")

        try:
            data = await self.client.resolve_short_id(organization_slug, short_id)
        except SentryNotFoundError:
            return ErrorHandler.handle_not_found_error("Short ID", short_id)
        except Exception as e:
            return ErrorHandler.handle_api_error(e, "resolve_short_id")

        formatter = IssueFormatter(FormatOptions(format=format))
        return text_result(formatter.format_short_id(data))

    async def extract_issue_context_data(
        self,
        organization_slug: OrganizationSlug,
        issue_id: Annotated[
            str, Field(description="The ID of the issue to extract context data from")
        ],
        extract_fields: Annotated[
            list[str],
            Field(
                description="Fields to extract from contexts/extra (for example: ['roomId', 'userId', 'message'])"
            ),
        ],
    ) -> CallToolResult:
        if missing := _missing_arguments(
            organization_slug=organization_slug, issue_id=issue_id
        ):
            return ErrorHandler.handle_validation_error(f"{', '.join(missing)} is required")
        if not extract_fields:
            return ErrorHandler.handle_validation_error(
                "extract_fields must contain at least one field name"
            )

        try:
            events = await self.client.get_issue_events(
                organization_slug, issue_id, full=True
            )
        except SentryNotFoundError:
            return ErrorHandler.handle_not_found_error("Issue", issue_id)
        except Exception as e:
            return ErrorHandler.handle_api_error(e, "extract_issue_context_data")

        result = extract_context_data(events, extract_fields)
        logger.info(
            f"Issue {issue_id}: {result.events_with_data}/{result.total_events} events with data"
        )
        return text_result(
            json.dumps(result.model_dump(), indent=2, ensure_ascii=False, default=str)
        )

    async def get_sentry_event(
        self,
        issue_id_or_url: Annotated[
            str,
            Field(description="Either a full Sentry issue URL or just the numeric issue ID"),
        ],
        event_id: Annotated[str, Field(description="The specific event ID to retrieve")],
        organization_slug: OrganizationSlug,
        view: View = "detailed",
        format: Format = "markdown",
    ) -> CallToolResult:
        try:
            reference = parse_issue_reference(
                issue_id_or_url, organization_slug, event_id
            )
        except ValueError as e:
            return ErrorHandler.handle_validation_error(str(e))
        if missing := _missing_arguments(
            organization_slug=reference.organization_slug,
            event_id=reference.event_id or "",
        ):
            return ErrorHandler.handle_validation_error(f"{', '.join(missing)} is required")

        try:
            event = await self.client.get_issue_event(
                reference.organization_slug, reference.issue_id, reference.event_id
            )
        except SentryNotFoundError:
            return ErrorHandler.handle_not_found_error("Event", reference.event_id)
        except Exception as e:
            return ErrorHandler.handle_api_error(e, "get_sentry_event")

        formatter = IssueFormatter(FormatOptions(format=format, view=view))
        return text_result(formatter.format_single_event(event, reference.event_id))

    async def find_sentry_event(
        self,
        organization_slug: OrganizationSlug,
        event_id: Annotated[str, Field(description="The event ID to look up")],
        format: Format = "markdown",
    ) -> CallToolResult:
        if missing := _missing_arguments(
            organization_slug=organization_slug, event_id=event_id
        ):
            return ErrorHandler.handle_validation_error(f"{', '.join(missing)} is required")

        try:
            data = await self.client.get_event_by_id(organization_slug, event_id)
        except SentryNotFoundError:
            return ErrorHandler.handle_not_found_error("Event", event_id)
        except Exception as e:
            return ErrorHandler.handle_api_error(e, "find_sentry_event")

        formatter = IssueFormatter(FormatOptions(format=format))
        output = formatter.format_single_event(data.get("event") or {}, event_id)
        if data.get("groupId"):
            output += f"{formatter.markup.bold('Issue ID')}: {data['groupId']}\n"
        return text_result(output)
