"""DispatchTools node - run the chosen tools against the query."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from toolpick.core.config import (
    FailurePolicy,
    QueryState,
    SelectionPolicy,
    ToolStep,
)
from toolpick.core.errors import ToolExecutionError
from toolpick.core.log import logger
from toolpick.tools.base import Tool
from toolpick.workflow.deps import QueryDeps
from toolpick.workflow.nodes.aggregate import Aggregate


def candidate_tools(
    selected: list[str], deps: QueryDeps
) -> list[Tool]:
    """Resolve which tools to run under the selection policy.

    Args:
        selected: Tool names parsed from the model response
        deps: Registry and dispatch policy

    Returns:
        Tools in the order they will run
    """
    if deps.dispatch.selection == SelectionPolicy.ALL:
        logger.info(
            "Selection policy 'all': running every registered tool",
            selected=selected,
        )
        return list(deps.registry)

    tools = []
    for name in selected:
        tool = deps.registry.find(name)
        if tool is None:
            logger.debug("No tool named '{name}', skipping", name=name)
            continue
        tools.append(tool)
    return tools


@dataclass
class DispatchTools(BaseNode[QueryState, QueryDeps]):
    """Run each candidate tool with the original query."""

    async def run(
        self, ctx: GraphRunContext[QueryState, QueryDeps]
    ) -> Aggregate:
        """Run tools in order, applying the failure policy.

        Raises:
            ToolExecutionError: First failure, under the strict policy

        Returns:
            Aggregate: Always joins whatever succeeded
        """
        state = ctx.state
        strict = ctx.deps.dispatch.on_tool_failure == FailurePolicy.STRICT

        for tool in candidate_tools(state.selected_tools, ctx.deps):
            step = ToolStep(tool_name=tool.name, tool_input=state.query)
            state.steps.append(step)

            try:
                step.output = tool.run(state.query)
            except ToolExecutionError as e:
                step.error = str(e)
                if strict:
                    raise
                logger.warning(
                    "Skipping failed tool '{tool_name}': {error}",
                    tool_name=tool.name,
                    error=str(e),
                )
                continue

            state.outputs.append(step.output)

        return Aggregate()
