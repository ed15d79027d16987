"""
Sentry REST API client for projects, issues and events
"""

import logging
from typing import Any

import aiohttp

from sentry_mcp.models.config import SentryConfig

logger = logging.getLogger(__name__)


class SentryApiError(Exception):
    """Non-success response from the Sentry API"""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class SentryNotFoundError(SentryApiError):
    """The requested Sentry resource does not exist"""


class SentryApiClient:
    """Service for reading projects, issues and events from the Sentry API"""

    def __init__(self, config: SentryConfig):
        self.config = config
        self.base_url = config.api_url
        self.headers = {
            "Authorization": f"Bearer {config.auth_token}",
            "Content-Type": "application/json",
        }
        self.timeout = aiohttp.ClientTimeout(total=config.timeout)

    async def _make_request(
        self, endpoint: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Make authenticated GET request to Sentry API"""
        url = f"{self.base_url}/{endpoint}"
        logger.debug(f"GET {url} params={params}")

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(
                url, headers=self.headers, params=params
            ) as response:
                if response.status >= 400:
                    error_text = await response.text()
                    message = f"API request failed: {response.status} {response.reason} - {error_text}"
                    if response.status == 404:
                        raise SentryNotFoundError(message, response.status)
                    raise SentryApiError(message, response.status)
                return await response.json()

    async def get_projects(self, organization_slug: str) -> list[dict[str, Any]]:
        return await self._make_request(f"organizations/{organization_slug}/projects/")

    async def get_project_issues(
        self, organization_slug: str, project_slug: str, query: str | None = None
    ) -> list[dict[str, Any]]:
        endpoint = f"projects/{organization_slug}/{project_slug}/issues/"
        if query:
            return await self._make_request(endpoint, {"query": query})
        return await self._make_request(endpoint)

    async def get_issue(self, organization_slug: str, issue_id: str) -> dict[str, Any]:
        return await self._make_request(
            f"organizations/{organization_slug}/issues/{issue_id}/"
        )

    async def get_issue_events(
        self, organization_slug: str, issue_id: str, full: bool = False
    ) -> list[dict[str, Any]]:
        # Issue events are addressed without the organization
        endpoint = f"issues/{issue_id}/events/"
        if full:
            return await self._make_request(endpoint, {"full": "true"})
        return await self._make_request(endpoint)

    async def resolve_short_id(
        self, organization_slug: str, short_id: str
    ) -> dict[str, Any]:
        return await self._make_request(
            f"organizations/{organization_slug}/shortids/{short_id}/"
        )

    async def get_event_by_id(
        self, organization_slug: str, event_id: str
    ) -> dict[str, Any]:
        return await self._make_request(
            f"organizations/{organization_slug}/eventids/{event_id}/"
        )

    async def get_issue_event(
        self, organization_slug: str, issue_id: str, event_id: str
    ) -> dict[str, Any]:
        """Get an event of an issue via the project the issue belongs to"""
        issue = await self.get_issue(organization_slug, issue_id)
        project_slug = (issue.get("project") or {}).get("slug")
        if not project_slug:
            raise SentryApiError(f"Issue {issue_id} has no project slug")

        return await self._make_request(
            f"projects/{organization_slug}/{project_slug}/events/{event_id}/"
        )
