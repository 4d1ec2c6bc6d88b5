"""Language model access for tool selection."""

from toolpick.model.client import AgentClient, LanguageModelClient
from toolpick.model.selector import build_selection_prompt, parse_selection

__all__ = [
    "AgentClient",
    "LanguageModelClient",
    "build_selection_prompt",
    "parse_selection",
]
