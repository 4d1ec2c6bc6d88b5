"""Query processor - runs one query through the workflow graph."""

from __future__ import annotations

from pydantic_graph import End

from toolpick.core.config import DispatchConfig, QueryState
from toolpick.core.errors import ToolpickError
from toolpick.core.log import logger
from toolpick.model.client import LanguageModelClient
from toolpick.tools.registry import ToolRegistry
from toolpick.workflow.deps import QueryDeps
from toolpick.workflow.graph import create_workflow
from toolpick.workflow.nodes import BuildPrompt


class QueryProcessor:
    """Answers a query by letting the model pick tools and running them.

    Phases run strictly in sequence: prompt construction, one model
    call, parsing, dispatch, aggregation. Nothing is retried.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        client: LanguageModelClient,
        dispatch: DispatchConfig | None = None,
        prompt_template: str | None = None,
    ):
        """Initialize processor.

        Args:
            registry: Tools available for selection
            client: Language model used for selection
            dispatch: Selection and failure policies
            prompt_template: Override for the selection prompt
        """
        self.deps = QueryDeps(
            registry=registry,
            client=client,
            dispatch=dispatch or DispatchConfig(),
            prompt_template=prompt_template,
        )
        self.workflow = create_workflow()
        self.last_state: QueryState | None = None

    async def process(self, query: str) -> str:
        """Process one query.

        Args:
            query: Raw user query, passed unchanged to every tool

        Returns:
            Tool outputs joined with newlines (may be empty)

        Raises:
            SelectionError: If the model call fails
            ToolExecutionError: If a tool fails under the strict policy
        """
        state = QueryState(query=query, status="running")
        self.last_state = state

        logger.info('Processing query: "{query}"', query=query)

        output = ""
        try:
            async with self.workflow.iter(
                BuildPrompt(), state=state, deps=self.deps
            ) as run:
                async for node in run:
                    if isinstance(node, End):
                        output = node.data
        except ToolpickError:
            state.status = "failed"
            raise

        return output
