"""Response envelope for the CLI's ``--json`` output."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class AgentResponse:
    """Standardized response envelope for all CLI commands.

    Every ``--json`` invocation prints exactly one envelope so scripts can
    check ``success`` before reading ``data``.
    """

    success: bool
    command: str
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    human_summary: str = ""
    schema_version: str = "1.0"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "command": self.command,
            "data": self.data,
            "errors": self.errors,
            "suggestions": self.suggestions,
            "human_summary": self.human_summary,
            "timestamp": datetime.now().isoformat(),
            "schema_version": self.schema_version,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string; dates are written in ISO format."""
        return json.dumps(self.to_dict(), indent=indent, default=_json_default)

    def emit(self) -> None:
        """Print the JSON envelope to stdout."""
        print(self.to_json())


def create_response(
    command: str,
    data: Optional[dict[str, Any]] = None,
    human_summary: str = "",
    suggestions: Optional[list[str]] = None,
) -> AgentResponse:
    """Create a successful AgentResponse.

    Args:
        command: The command that was executed, e.g. "weight add"
        data: Command-specific result data
        human_summary: One-line description for humans
        suggestions: Actionable suggestions for next steps
    """
    return AgentResponse(
        success=True,
        command=command,
        data=data or {},
        suggestions=suggestions or [],
        human_summary=human_summary,
    )


def error_response(
    command: str,
    error: str,
    suggestions: Optional[list[str]] = None,
) -> AgentResponse:
    """Create an error response with success=False."""
    return AgentResponse(
        success=False,
        command=command,
        errors=[error],
        suggestions=suggestions or [],
        human_summary=f"Error: {error}",
    )
