"""Tool selection prompt construction and response parsing."""

from __future__ import annotations

from toolpick.core.config import DEFAULT_SELECTION_PROMPT
from toolpick.tools.registry import ToolRegistry


def build_selection_prompt(
    registry: ToolRegistry,
    query: str,
    template: str | None = None,
) -> str:
    """Fill the selection template with the tool list and the query.

    Args:
        registry: Tools offered to the model
        query: Raw user query, embedded verbatim
        template: Template with {tools} and {input} placeholders

    Returns:
        Prompt text
    """
    return (template or DEFAULT_SELECTION_PROMPT).format(
        tools=registry.to_prompt_description(),
        input=query,
    )


def parse_selection(text: str) -> list[str]:
    """Split a model response into tool names, one per line.

    Lines are trimmed and blank lines dropped. Names are neither
    deduplicated nor checked against any registry.
    """
    return [line.strip() for line in text.splitlines() if line.strip()]
