"""
Formatter for Sentry issues and events
"""

import json
from collections.abc import Callable
from typing import Any

from sentry_mcp.formatters.base_formatter import BaseFormatter, value_or

ENVIRONMENT_TAGS = ("environment", "level", "release", "server_name", "runtime")
MAX_APP_FRAMES = 5
MAX_FRAMES = 10

Accessor = Callable[[dict[str, Any]], Any]

# Later sources overwrite earlier keys
ADDITIONAL_DATA_SOURCES: list[Accessor] = [
    lambda event: event.get("context"),
    lambda event: event.get("contexts"),
    lambda event: event.get("extra"),
]

FRAME_VARS_SOURCES: list[Accessor] = [
    lambda frame_vars: frame_vars.get("context"),
    lambda frame_vars: _as_dict(frame_vars.get("record")).get("context"),
    lambda frame_vars: _as_dict(frame_vars.get("record")).get("extra"),
]


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _merge_sources(target: Any, sources: list[Accessor]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for source in sources:
        data = source(target)
        if isinstance(data, dict) and data:
            merged.update(data)
    return merged


def find_stacktrace_frames(event: dict[str, Any]) -> list[dict[str, Any]] | None:
    """Frames of the first stacktrace entry, or None when the event has none"""
    for entry in event.get("entries") or []:
        if entry.get("type") != "stacktrace":
            continue
        frames = _as_dict(entry.get("data")).get("frames")
        return frames if frames else None
    return None


def collect_additional_data(event: dict[str, Any]) -> dict[str, Any]:
    """Merge context, contexts and extra; fall back to stack frame vars.

    The frame fallback uses the last frame carrying a non-empty ``vars`` map
    and only applies when the event-level maps contribute nothing.
    """
    additional_data = _merge_sources(event, ADDITIONAL_DATA_SOURCES)
    if additional_data:
        return additional_data

    for frame in reversed(find_stacktrace_frames(event) or []):
        frame_vars = frame.get("vars")
        if isinstance(frame_vars, dict) and frame_vars:
            return _merge_sources(frame_vars, FRAME_VARS_SOURCES)

    return {}


def select_frames(frames: list[dict[str, Any]]) -> list[tuple[int, dict[str, Any]]]:
    """Pick the frames worth showing, paired with their 1-based position.

    The last in-app frames win; without any in-app frame the tail of the
    whole stack is used instead.
    """
    numbered = list(enumerate(frames, start=1))
    app_frames = [(number, frame) for number, frame in numbered if frame.get("inApp")]
    if app_frames:
        return app_frames[-MAX_APP_FRAMES:]
    return numbered[-MAX_FRAMES:]


def find_tag(tags: list[dict[str, Any]] | None, key: str, default: str = "unknown") -> str:
    for tag in tags or []:
        if tag.get("key") == key:
            return value_or(tag.get("value"), default)
    return default


class IssueFormatter(BaseFormatter):
    def format_issue_list(self, issues: list[dict[str, Any]], project_slug: str) -> str:
        if not issues:
            return (
                self.markup.header(f"Issues for Project: {project_slug}")
                + "No issues found for this project.\n"
            )

        if self.is_detailed():
            return self._format_detailed_issue_list(issues, project_slug)
        return self._format_summary_issue_list(issues, project_slug)

    def format_issue_details(self, issue: dict[str, Any]) -> str:
        if self.is_detailed():
            return self._format_detailed_issue(issue)
        return self._format_summary_issue(issue)

    def format_event_list(self, events: list[dict[str, Any]], issue_title: str) -> str:
        if not events:
            return (
                self.markup.header(f"Events for {issue_title}")
                + "No events found for this issue.\n"
            )

        if self.is_detailed():
            return self._format_detailed_event_list(events, issue_title)
        return self._format_summary_event_list(events, issue_title)

    def format_single_event(self, event: dict[str, Any], event_id: str) -> str:
        """Full report for one event; the same in summary and detailed view"""
        output = self.markup.header(f"Event Details: {event_id}")

        output += self.markup.header("Error Overview", 2)
        title = event.get("title") or _as_dict(event.get("metadata")).get("title")
        output += self.markup.list_items(
            [
                self.field("Title", title),
                self.field("Platform", event.get("platform")),
                self.field("Date", event.get("dateCreated")),
                self.field("Culprit", event.get("culprit")),
            ]
        )

        environment_tags = [
            tag for tag in event.get("tags") or [] if tag.get("key") in ENVIRONMENT_TAGS
        ]
        if environment_tags:
            output += self.markup.header("Environment", 2)
            if self.is_markdown():
                rows = [[tag.get("key"), tag.get("value")] for tag in environment_tags]
                output += self.markup.table(["Key", "Value"], rows)
            else:
                output += self.markup.list_items(
                    [f"{tag.get('key')}: {tag.get('value')}" for tag in environment_tags]
                )

        additional_data = collect_additional_data(event)
        if additional_data:
            output += self.markup.header("Additional Data", 2)
            output += self.markup.code_block(
                json.dumps(additional_data, indent=2, ensure_ascii=False, default=str),
                "json",
            )

        frames = find_stacktrace_frames(event)
        if frames:
            output += self.markup.header("Stack Trace", 2)
            output += self._format_frames(frames)

        user_details = self._user_details(event.get("user"))
        if user_details:
            output += self.markup.header("User Information", 2)
            output += self.markup.list_items(user_details)

        return output

    def format_short_id(self, data: dict[str, Any]) -> str:
        """Issue resolved from a short ID such as PROJECT-123"""
        group = _as_dict(data.get("group"))
        permalink = value_or(group.get("permalink"))

        output = self.markup.header(f"Issue Details: {data.get('shortId')}")
        output += self.markup.header("Issue Information", 2)
        output += self.markup.list_items(
            [
                self.field("Title", group.get("title")),
                self.field("Status", group.get("status")),
                self.field("Level", group.get("level")),
                self.field("Event Count", group.get("count")),
                self.field("User Count", group.get("userCount")),
                f"{self.markup.bold('Permalink')}: {self.markup.link(permalink, permalink)}",
            ]
        )
        return output

    def _format_frames(self, frames: list[dict[str, Any]]) -> str:
        output = ""
        shown = select_frames(frames)

        for number, frame in shown:
            location = f"{frame.get('filename')}:{frame.get('lineNo')}"
            output += f"{self.markup.bold(f'Frame {number}')}: {self.markup.inline_code(location)}\n"
            output += f"- Function: {self.markup.inline_code(value_or(frame.get('function')))}\n"

            for line in frame.get("context") or []:
                if len(line) >= 2 and line[0] == frame.get("lineNo"):
                    output += f"- Code: {self.markup.inline_code(str(line[1]).strip())}\n"
                    break
            output += "\n"

        if len(shown) < len(frames):
            note = f"Showing {len(shown)} most relevant frames ({len(frames)} total)"
            output += (f"*{note}*" if self.is_markdown() else note) + "\n\n"

        return output

    def _user_details(self, user: Any) -> list[str]:
        user = _as_dict(user)
        details = []
        if user.get("id"):
            details.append(self.field("ID", user["id"]))
        if user.get("email"):
            details.append(self.field("Email", user["email"]))
        if user.get("username"):
            details.append(self.field("Username", user["username"]))
        ip_address = user.get("ip_address") or user.get("ip")
        if ip_address:
            details.append(self.field("IP Address", ip_address))
        return details

    def _issue_fields(self, issue: dict[str, Any]) -> list[str]:
        permalink = value_or(issue.get("permalink"))
        return [
            self.field("ID", issue.get("id")),
            self.field("Short ID", issue.get("shortId")),
            self.field("Status", issue.get("status")),
            self.field("Level", issue.get("level")),
            self.field("First Seen", issue.get("firstSeen")),
            self.field("Last Seen", issue.get("lastSeen")),
            self.field("Event Count", issue.get("count")),
            self.field("User Count", issue.get("userCount")),
            self.field("Culprit", issue.get("culprit")),
            f"{self.markup.bold('Permalink')}: {self.markup.link(permalink, permalink)}",
        ]

    def _format_detailed_issue_list(
        self, issues: list[dict[str, Any]], project_slug: str
    ) -> str:
        output = self.markup.header(f"Issues for Project: {project_slug}")

        if self.is_markdown():
            headers = [
                "ID",
                "Short ID",
                "Title",
                "Status",
                "Level",
                "First Seen",
                "Last Seen",
                "Events",
                "Users",
            ]
            rows = [
                [
                    issue.get("id"),
                    issue.get("shortId"),
                    issue.get("title"),
                    issue.get("status"),
                    issue.get("level"),
                    issue.get("firstSeen"),
                    issue.get("lastSeen"),
                    issue.get("count"),
                    issue.get("userCount"),
                ]
                for issue in issues
            ]
            output += self.markup.table(headers, rows)

        output += self.markup.header("Issue Details", 2)

        for number, issue in enumerate(issues, start=1):
            output += self.markup.header(f"Issue {number}: {issue.get('title')}", 3)
            output += self.markup.list_items(self._issue_fields(issue))

            buckets = self.stats_24h(issue)
            if buckets:
                output += self.markup.header("24-Hour Event Distribution", 4)
                output += self.format_stats_breakdown(buckets)

            output += self.markup.separator()

        output += self.markup.header("Summary", 2)
        output += f"Total Issues: {len(issues)}\n"

        return output

    def _format_summary_issue_list(
        self, issues: list[dict[str, Any]], project_slug: str
    ) -> str:
        output = self.markup.header(f"Issues for Project: {project_slug}")

        items = []
        for issue in issues:
            main_info = f"{self.markup.bold(str(issue.get('title')))} ({issue.get('shortId')})"
            details = f"Status: {issue.get('status')}, Level: {issue.get('level')}, Events: {issue.get('count')}"
            timing = f"First seen: {issue.get('firstSeen')}, Last seen: {issue.get('lastSeen')}"
            items.append(f"{main_info}\n  - {details}\n  - {timing}")

        output += self.markup.list_items(items)
        output += f"Total Issues: {len(issues)}\n"

        return output

    def _format_detailed_issue(self, issue: dict[str, Any]) -> str:
        output = self.markup.header(f"Issue: {issue.get('title')}")

        output += self.markup.header("Overview", 2)
        output += self.markup.list_items(self._issue_fields(issue))

        project = _as_dict(issue.get("project"))
        if project:
            output += self.markup.header("Project", 2)
            output += self.markup.list_items(
                [
                    self.field("Name", project.get("name")),
                    self.field("ID", project.get("id")),
                    self.field("Slug", project.get("slug")),
                ]
            )

        release = _as_dict(issue.get("firstRelease"))
        if release:
            output += self.markup.header("First Release", 2)
            output += self.markup.list_items(
                [
                    self.field("Version", release.get("version")),
                    self.field("Short Version", release.get("shortVersion")),
                    self.field("Date Created", release.get("dateCreated")),
                    self.field("First Event", release.get("firstEvent")),
                    self.field("Last Event", release.get("lastEvent")),
                ]
            )

            release_projects = release.get("projects") or []
            if release_projects:
                output += self.markup.bold("Projects") + ":\n"
                output += self.markup.list_items(
                    [f"{p.get('name')} ({p.get('slug')})" for p in release_projects]
                )

        tags = issue.get("tags") or []
        if tags:
            output += self.markup.header("Tags", 2)
            output += self.format_tags(tags)

        buckets = self.stats_24h(issue)
        if buckets:
            output += self.markup.header("24-Hour Event Distribution", 2)
            output += self.format_stats_breakdown(buckets)

        return output

    def _format_summary_issue(self, issue: dict[str, Any]) -> str:
        output = self.markup.header(f"Issue: {issue.get('title')}")

        bold = self.markup.bold
        permalink = value_or(issue.get("permalink"))
        project = _as_dict(issue.get("project"))
        output += self.markup.list_items(
            [
                self.field("Short ID", issue.get("shortId")),
                f"{self.field('Status', issue.get('status'))}, {self.field('Level', issue.get('level'))}",
                f"{self.field('First Seen', issue.get('firstSeen'))}, {self.field('Last Seen', issue.get('lastSeen'))}",
                f"{self.field('Events', issue.get('count'))}, {self.field('Users Affected', issue.get('userCount'))}",
                self.field("Project", project.get("name")),
                f"{bold('Permalink')}: {self.markup.link(permalink, permalink)}",
            ]
        )

        buckets = self.stats_24h(issue)
        if buckets:
            total_24h = sum(int(count) for _, count in buckets)
            output += f"\n{bold('24-Hour Event Count')}: {total_24h}\n"

        return output

    def _format_detailed_event_list(
        self, events: list[dict[str, Any]], issue_title: str
    ) -> str:
        output = self.markup.header(f"Events for {issue_title}")

        if self.is_markdown():
            headers = ["Event ID", "Title", "Platform", "Date Created", "Location"]
            rows = [
                [
                    self._event_id(event),
                    value_or(event.get("title")),
                    value_or(event.get("platform")),
                    value_or(event.get("dateCreated")),
                    value_or(event.get("location")),
                ]
                for event in events
            ]
            output += self.markup.table(headers, rows)

        output += self.markup.header("Event Details", 2)

        for number, event in enumerate(events, start=1):
            output += self.markup.header(
                f"Event {number}: {event.get('title') or self._event_id(event)}", 3
            )
            output += self.markup.list_items(
                [
                    self.field("Event ID", self._event_id(event)),
                    self.field("Date Created", event.get("dateCreated")),
                    self.field("Platform", event.get("platform")),
                    self.field("Type", event.get("event.type") or event.get("type")),
                    self.field("Location", event.get("location")),
                    self.field("Culprit", event.get("culprit")),
                ]
            )

            tags = event.get("tags") or []
            if tags:
                output += self.markup.header("Tags", 4)
                output += self.format_tags(tags)

            user_details = self._user_details(event.get("user"))
            if user_details:
                output += self.markup.header("User Information", 4)
                output += self.markup.list_items(user_details)

            output += self.markup.separator()

        output += self.markup.header("Summary", 2)
        output += f"Total Events: {len(events)}\n"

        return output

    def _format_summary_event_list(
        self, events: list[dict[str, Any]], issue_title: str
    ) -> str:
        output = self.markup.header(f"Events for {issue_title}")

        items = []
        for event in events:
            tags = event.get("tags")
            main_info = self.field("Event ID", self._event_id(event))
            details = f"Title: {value_or(event.get('title'))}"
            context = (
                f"Level: {find_tag(tags, 'level')}, "
                f"Environment: {find_tag(tags, 'environment')}, "
                f"Platform: {value_or(event.get('platform'))}"
            )
            timing = f"Date: {value_or(event.get('dateCreated'))}"
            items.append(f"{main_info}\n  - {details}\n  - {context}\n  - {timing}")

        output += self.markup.list_items(items)
        output += f"Total Events: {len(events)}\n"

        return output

    @staticmethod
    def _event_id(event: dict[str, Any]) -> str:
        return value_or(event.get("eventID") or event.get("id"))
