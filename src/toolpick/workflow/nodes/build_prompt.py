"""BuildPrompt node - render the tool selection prompt."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from toolpick.core.config import QueryState
from toolpick.model.selector import build_selection_prompt
from toolpick.workflow.deps import QueryDeps
from toolpick.workflow.nodes.select_tools import SelectTools


@dataclass
class BuildPrompt(BaseNode[QueryState, QueryDeps]):
    """Embed the registry and the query in the selection prompt."""

    async def run(
        self, ctx: GraphRunContext[QueryState, QueryDeps]
    ) -> SelectTools:
        ctx.state.prompt = build_selection_prompt(
            ctx.deps.registry,
            ctx.state.query,
            ctx.deps.prompt_template,
        )
        return SelectTools()
