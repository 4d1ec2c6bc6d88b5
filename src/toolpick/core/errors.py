"""Error hierarchy for toolpick.

Everything user-visible derives from ToolpickError so the application
can report it with a short message and a non-zero exit code.
"""

from __future__ import annotations


class ToolpickError(Exception):
    """Base for all toolpick errors."""


class ConfigurationError(ToolpickError):
    """Missing or invalid configuration (e.g., no API key)."""


class ValidationError(ToolpickError):
    """Invalid command-line arguments."""


class SelectionError(ToolpickError):
    """The language model call failed or returned unusable text."""


class ToolExecutionError(ToolpickError):
    """A tool's run() failed.

    Attributes:
        tool_name: Name of the failing tool, when known.
    """

    def __init__(self, message: str, tool_name: str | None = None) -> None:
        self.tool_name = tool_name
        super().__init__(message)


__all__ = [
    "ToolpickError",
    "ConfigurationError",
    "ValidationError",
    "SelectionError",
    "ToolExecutionError",
]
