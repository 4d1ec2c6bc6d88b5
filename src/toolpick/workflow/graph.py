"""Graph workflow definition."""

from pydantic_graph import Graph

from toolpick.core.config import QueryState
from toolpick.core.log import logger
from toolpick.workflow.deps import QueryDeps
from toolpick.workflow.nodes import (
    Aggregate,
    BuildPrompt,
    DispatchTools,
    ParseSelection,
    SelectTools,
)


def create_workflow() -> Graph[QueryState, QueryDeps, str]:
    """Create the query workflow graph.

    BuildPrompt → SelectTools → ParseSelection → DispatchTools →
        Aggregate → End

    Returns:
        Graph with QueryState as state_type and str output
    """
    logger.debug("Building workflow graph")
    return Graph(
        nodes=(
            BuildPrompt,
            SelectTools,
            ParseSelection,
            DispatchTools,
            Aggregate,
        ),
        state_type=QueryState,
        run_end_type=str,
    )
