from urllib.parse import urlparse

from sentry_mcp.models.sentry import SentryUrlReference


def parse_issue_reference(
    issue_id_or_url: str, organization_slug: str, event_id: str | None = None
) -> SentryUrlReference:
    """Resolve an issue ID or Sentry issue URL into its identifiers.

    URLs are read positionally:
    ``/organizations/<org>/issues/<issue_id>/events/<event_id>/``.
    Values found in the URL take precedence over the supplied ones.
    """
    value = issue_id_or_url.strip()
    if not value:
        raise ValueError("issue_id_or_url must not be empty")

    if not value.startswith("http"):
        return SentryUrlReference(
            organization_slug=organization_slug, issue_id=value, event_id=event_id
        )

    parts = [part for part in urlparse(value).path.split("/") if part]
    issue_id = None

    if len(parts) >= 2 and parts[0] == "organizations":
        organization_slug = parts[1]
    if len(parts) >= 4 and parts[2] == "issues":
        issue_id = parts[3]
    if len(parts) >= 6 and parts[4] == "events":
        event_id = parts[5]

    if not issue_id:
        raise ValueError(f"could not find an issue ID in URL: {value}")

    return SentryUrlReference(
        organization_slug=organization_slug, issue_id=issue_id, event_id=event_id
    )
