from typing import Any

from sentry_mcp.formatters.base_formatter import BaseFormatter, value_or


class ProjectFormatter(BaseFormatter):
    def format_projects(self, projects: list[dict[str, Any]]) -> str:
        if not projects:
            return (
                self.markup.header("Sentry Projects")
                + "No projects found for this organization.\n"
            )

        if self.is_detailed():
            return self._format_detailed(projects)
        return self._format_summary(projects)

    def _format_detailed(self, projects: list[dict[str, Any]]) -> str:
        output = self.markup.header("Sentry Projects")

        if self.is_markdown():
            headers = [
                "ID",
                "Name",
                "Slug",
                "Platform",
                "Teams",
                "Environments",
                "Features",
            ]
            rows = [
                [
                    project.get("id"),
                    project.get("name"),
                    project.get("slug"),
                    value_or(project.get("platform")),
                    self._team_names(project),
                    value_or(", ".join(project.get("environments") or []), "None"),
                    value_or(", ".join(project.get("features") or []), "None"),
                ]
                for project in projects
            ]
            output += self.markup.table(headers, rows)
        else:
            for project in projects:
                output += f"ID: {project.get('id')}\n"
                output += f"Name: {project.get('name')}\n"
                output += f"Slug: {project.get('slug')}\n"
                output += f"Platform: {value_or(project.get('platform'))}\n"
                output += f"Teams: {self._team_names(project)}\n"
                output += f"Environments: {value_or(', '.join(project.get('environments') or []), 'None')}\n"
                output += f"Features: {value_or(', '.join(project.get('features') or []), 'None')}\n\n"

        output += self.markup.header("Summary", 2)
        output += f"Total Projects: {len(projects)}\n"

        return output

    def _format_summary(self, projects: list[dict[str, Any]]) -> str:
        output = self.markup.header("Sentry Projects")

        items = [
            f"{self.markup.bold(str(project.get('name')))} ({project.get('slug')}): ID {project.get('id')}"
            for project in projects
        ]

        output += self.markup.list_items(items)
        output += f"Total Projects: {len(projects)}\n"

        return output

    @staticmethod
    def _team_names(project: dict[str, Any]) -> str:
        return ", ".join(str(team.get("name")) for team in project.get("teams") or [])
