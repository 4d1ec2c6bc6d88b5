"""Aggregate node - join tool outputs into the final answer."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from toolpick.core.config import QueryState
from toolpick.core.log import logger
from toolpick.workflow.deps import QueryDeps


@dataclass
class Aggregate(BaseNode[QueryState, QueryDeps, str]):
    """Join successful outputs with newlines, in dispatch order."""

    async def run(
        self, ctx: GraphRunContext[QueryState, QueryDeps]
    ) -> End[str]:
        """Returns:
            End[str]: Joined output, empty when no tool produced any
        """
        ctx.state.output = "\n".join(ctx.state.outputs)
        ctx.state.status = "complete"
        logger.info(
            "Final combined output",
            output_count=len(ctx.state.outputs),
        )
        return End(ctx.state.output)
