"""JSON output formatter for CLI."""

from __future__ import annotations

import json
from typing import Any

from scriptboard.cli.formatters.base import OutputFormat, OutputFormatter


class JsonFormatter(OutputFormatter[Any]):
    """Generic JSON formatter for CLI output."""

    def format(self, data: Any, format_type: OutputFormat = OutputFormat.JSON) -> str:  # noqa: ARG002
        """Format data as JSON.

        Args:
            data: Data to format
            format_type: Output format type (ignored, always JSON)

        Returns:
            JSON string
        """
        if hasattr(data, "model_dump"):
            return json.dumps(data.model_dump(mode="json"), default=str, indent=2)
        if isinstance(data, dict | list | tuple):
            return json.dumps(_dump_items(data), default=str, indent=2)
        if hasattr(data, "__dict__"):
            return json.dumps(data.__dict__, default=str, indent=2)
        return json.dumps({"value": data}, default=str, indent=2)

    def format_success(self, message: str, data: Any = None) -> str:
        """Format a success response."""
        response: dict[str, Any] = {"success": True, "message": message}
        if data is not None:
            response["data"] = _dump_items(data)
        return json.dumps(response, default=str, indent=2)

    def format_error_response(self, error: str | Exception, code: int = 1) -> str:
        """Format an error response.

        Args:
            error: Error message or exception
            code: Error code

        Returns:
            JSON string
        """
        message = getattr(error, "message", None) or str(error)
        response: dict[str, Any] = {"success": False, "error": message, "code": code}
        hint = getattr(error, "hint", None)
        if hint:
            response["hint"] = hint
        return json.dumps(response, default=str, indent=2)


def _dump_items(data: Any) -> Any:
    """Dump pydantic models nested one level inside collections."""
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    if isinstance(data, dict):
        return {key: _dump_items(value) for key, value in data.items()}
    if isinstance(data, list | tuple):
        return [_dump_items(item) for item in data]
    return data
