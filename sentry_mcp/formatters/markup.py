"""
Rendering primitives for markdown and plain text output
"""

from typing import Any

from sentry_mcp.models.formatting import OutputFormat

PLAIN_RULE_WIDTH = 50


class Markup:
    """Builds headers, tables, lists and inline markup for one output format.

    Every method returns a new string and keeps no state, so a single
    instance can be shared by any number of renders.
    """

    def __init__(self, output_format: OutputFormat = OutputFormat.MARKDOWN):
        self.output_format = OutputFormat(output_format)

    @property
    def is_markdown(self) -> bool:
        return self.output_format == OutputFormat.MARKDOWN

    def header(self, title: str, level: int = 1) -> str:
        if self.is_markdown:
            return f"{'#' * level} {title}\n\n"
        return f"{title}\n\n"

    def table(self, headers: list[str], rows: list[list[Any]]) -> str:
        cells = [[str(cell) for cell in row] for row in rows]

        if self.is_markdown:
            table = f"| {' | '.join(headers)} |\n"
            table += f"|{'|'.join('----' for _ in headers)}|\n"
            for row in cells:
                table += f"| {' | '.join(row)} |\n"
            return table + "\n"

        table = " | ".join(headers) + "\n"
        for row in cells:
            table += " | ".join(row) + "\n"
        return table + "\n"

    def list_items(self, items: list[str], ordered: bool = False) -> str:
        # Same bullets in both formats
        lines = [
            f"{index}. {item}" if ordered else f"- {item}"
            for index, item in enumerate(items, start=1)
        ]
        return "\n".join(lines) + "\n\n"

    def code_block(self, code: str, language: str = "") -> str:
        if self.is_markdown:
            return f"```{language}\n{code}\n```\n\n"
        return f"{code}\n\n"

    def inline_code(self, text: str) -> str:
        if self.is_markdown:
            return f"`{text}`"
        return text

    def link(self, text: str, url: str) -> str:
        if self.is_markdown:
            return f"[{text}]({url})"
        return f"{text}: {url}"

    def bold(self, text: str) -> str:
        if self.is_markdown:
            return f"**{text}**"
        return text

    def separator(self) -> str:
        if self.is_markdown:
            return "\n---\n\n"
        return "\n" + "-" * PLAIN_RULE_WIDTH + "\n\n"
