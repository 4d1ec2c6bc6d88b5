#!/usr/bin/env python3
"""toolpick CLI - let a language model pick tools for a query."""

import asyncio
import sys

from pydantic import Field
from pydantic_settings import CliApp

from toolpick.app import AssistantApp
from toolpick.core.config import State
from toolpick.core.errors import ValidationError
from toolpick.core.log import logger


class CliState(State):
    """Ask a question; a language model picks the tools that answer it.

    Built-in tools: time_check (current time) and calculator
    (multiplies "a * b").

    Configuration sources (in priority order):
    1. Command-line arguments (--config.llm.model openai:gpt-4o)
    2. Environment variables (TOOLPICK_CONFIG__LLM__MODEL=...)
    3. .env file for secrets
    4. --include files, ./toolpick.yaml, user config, defaults

    The API key is read from OPENAI_API_KEY unless
    config.llm.api_key_env or config.llm.api_key say otherwise.
    """

    query: str | None = Field(default=None, description="Your question")
    verbose: bool = Field(
        default=False, description="Show available tools"
    )

    def validate_arguments(self) -> None:
        """Raises:
            ValidationError: If neither --query nor --verbose is given
        """
        if not self.verbose and self.query is None:
            raise ValidationError(
                "Either --query or --verbose must be provided"
            )

    def cli_cmd(self):
        """Validate arguments, run the app, exit with its status."""
        try:
            self.validate_arguments()
        except ValidationError as e:
            print(f"Error: {e}", file=sys.stderr)
            raise SystemExit(2) from e

        # Closing the logger flushes file sinks on every exit path
        with logger:
            app = AssistantApp(self)
            exit_code = asyncio.run(app.run(self.query, self.verbose))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
