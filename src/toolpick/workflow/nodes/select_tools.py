"""SelectTools node - ask the language model which tools apply."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from toolpick.core.config import QueryState
from toolpick.core.errors import SelectionError, ToolpickError
from toolpick.core.log import logger
from toolpick.workflow.deps import QueryDeps
from toolpick.workflow.nodes.parse_selection import ParseSelection


@dataclass
class SelectTools(BaseNode[QueryState, QueryDeps]):
    """Send the selection prompt and keep the raw answer."""

    async def run(
        self, ctx: GraphRunContext[QueryState, QueryDeps]
    ) -> ParseSelection:
        """Raises:
            SelectionError: If the client fails or returns no text
        """
        logger.info("Asking LLM to select tools...")
        try:
            text = await ctx.deps.client.generate(ctx.state.prompt)
        except ToolpickError:
            raise
        except Exception as e:
            logger.error(
                "Language model client failed: {error}",
                error=str(e),
                exception_type=type(e).__name__,
            )
            raise SelectionError(
                f"Failed to get tool selection from LLM: {e}"
            ) from e

        if not text or not text.strip():
            raise SelectionError("Failed to get tool selection from LLM")

        ctx.state.raw_selection = text
        return ParseSelection()
