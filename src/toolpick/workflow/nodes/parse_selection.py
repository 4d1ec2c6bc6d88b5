"""ParseSelection node - turn the model answer into tool names."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from toolpick.core.config import QueryState
from toolpick.core.log import logger
from toolpick.model.selector import parse_selection
from toolpick.workflow.deps import QueryDeps
from toolpick.workflow.nodes.dispatch_tools import DispatchTools


@dataclass
class ParseSelection(BaseNode[QueryState, QueryDeps]):
    """Split the raw selection into trimmed, non-empty lines."""

    async def run(
        self, ctx: GraphRunContext[QueryState, QueryDeps]
    ) -> DispatchTools:
        names = parse_selection(ctx.state.raw_selection)
        ctx.state.selected_tools = names
        logger.info("LLM selected tools: {selected}", selected=names)
        return DispatchTools()
