"""Ordered tool registry."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from toolpick.tools.base import Tool


class ToolRegistry:
    """Ordered collection of tools with lookup by exact name.

    Order is registration order and decides both listing order and
    which tool wins when two share a name (the first one).
    """

    def __init__(self, tools: Iterable[Tool] = ()):
        self._tools: list[Tool] = list(tools)

    def register(self, tool: Tool) -> None:
        """Append a tool."""
        self._tools.append(tool)

    def list_tools(self) -> list[tuple[str, str]]:
        """Return (name, description) pairs in registration order."""
        return [(tool.name, tool.description) for tool in self._tools]

    def find(self, name: str) -> Tool | None:
        """Return the first tool called `name`, or None."""
        return next(
            (tool for tool in self._tools if tool.name == name), None
        )

    def to_prompt_description(self) -> str:
        """Render one `- name: description` line per tool."""
        return "\n".join(
            f"- {name}: {description}"
            for name, description in self.list_tools()
        )

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)
