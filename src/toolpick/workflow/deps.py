"""Dependencies shared by every node of a query run."""

from __future__ import annotations

from dataclasses import dataclass, field

from toolpick.core.config import DispatchConfig
from toolpick.model.client import LanguageModelClient
from toolpick.tools.registry import ToolRegistry


@dataclass
class QueryDeps:
    """Collaborators a query run reads but never mutates."""

    registry: ToolRegistry
    client: LanguageModelClient
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    prompt_template: str | None = None
