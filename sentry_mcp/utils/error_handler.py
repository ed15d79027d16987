"""
Uniform error responses for MCP tools
"""

import logging

from mcp.types import CallToolResult, TextContent

logger = logging.getLogger(__name__)


def text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=text)], isError=is_error
    )


class ErrorHandler:
    @staticmethod
    def handle_api_error(error: Exception, context: str) -> CallToolResult:
        logger.error(f"Error in {context}: {error}")
        return text_result(f"Error in {context}: {error}", is_error=True)

    @staticmethod
    def handle_validation_error(message: str) -> CallToolResult:
        logger.error(f"Validation error: {message}")
        return text_result(f"Validation error: {message}", is_error=True)

    @staticmethod
    def handle_not_found_error(resource: str, identifier: str) -> CallToolResult:
        logger.error(f"{resource} not found: {identifier}")
        return text_result(f"{resource} not found: {identifier}", is_error=True)
