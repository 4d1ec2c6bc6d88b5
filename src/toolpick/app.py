"""Main application orchestrator for toolpick."""

from __future__ import annotations

import sys

from toolpick.core.config import State
from toolpick.core.errors import ToolpickError
from toolpick.core.log import logger
from toolpick.model.client import AgentClient
from toolpick.tools import ToolRegistry, default_tools
from toolpick.workflow.processor import QueryProcessor


class AssistantApp:
    """Lists tools and answers one query with the configured model."""

    def __init__(self, state: State, registry: ToolRegistry | None = None):
        """Initialize the application.

        Args:
            state: Loaded configuration and runtime state
            registry: Tools to offer; the built-in tools by default
        """
        self.state = state
        self.registry = registry or ToolRegistry(default_tools())

    def print_tools(self) -> None:
        """Print every registered tool as `- name: description`."""
        print("Available tools:")
        for name, description in self.registry.list_tools():
            print(f"- {name}: {description}")

    async def run(self, query: str | None, verbose: bool = False) -> int:
        """Run the assistant.

        Args:
            query: Question to answer, or None to only list tools
            verbose: List the registered tools first

        Returns:
            Exit code: 0 for success, 1 for failure
        """
        if verbose:
            self.print_tools()
        if query is None:
            return 0

        try:
            result = await self.answer(query)
        except ToolpickError as e:
            logger.error(
                "{error_type}: {error}",
                error_type=type(e).__name__,
                error=str(e),
            )
            print(f"Error: {e}", file=sys.stderr)
            return 1

        print("\nFinal output:")
        print(result)
        return 0

    async def answer(self, query: str) -> str:
        """Answer one query; the HTTP pool lives only for this call.

        Raises:
            ConfigurationError: If no API key is available (before
                any network I/O)
            SelectionError: If the model call fails
            ToolExecutionError: If a tool fails under the strict policy
        """
        config = self.state.config
        api_key = config.llm.resolve_api_key()

        async with AgentClient(config.llm, api_key=api_key) as client:
            processor = QueryProcessor(
                self.registry,
                client,
                dispatch=config.dispatch,
                prompt_template=config.prompts.selection,
            )
            try:
                return await processor.process(query)
            finally:
                self.state.runtime.query = processor.last_state
