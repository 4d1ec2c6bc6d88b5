"""Base tool interface."""

from typing import Protocol


class Tool(Protocol):
    """Protocol for tools the language model can pick.

    A tool maps the raw user query to a short text answer.
    """

    @property
    def name(self) -> str:
        """Stable identifier the model answers with."""
        ...

    @property
    def description(self) -> str:
        """What the tool does, shown to the model and the user."""
        ...

    def run(self, tool_input: str) -> str:
        """Run the tool against the user query.

        Args:
            tool_input: The original user query

        Returns:
            Human-readable result text

        Raises:
            ToolExecutionError: If the tool cannot produce a result
        """
        ...
