"""Multiplication tool."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar

from toolpick.core.errors import ToolExecutionError
from toolpick.tools.execution import log_tool_execution

PRODUCT_PATTERN = re.compile(r"(\d+)\s*\*\s*(\d+)")


@dataclass(frozen=True)
class CalculatorTool:
    """Multiplies the first `a * b` pair of integers found in the input.

    Only multiplication is supported. Later pairs in the same input
    are ignored.
    """

    name: ClassVar[str] = "calculator"
    description: ClassVar[str] = (
        "Multiply two numbers (format: number * number)"
    )

    @log_tool_execution
    def run(self, tool_input: str) -> str:
        match = PRODUCT_PATTERN.search(tool_input)
        if match is None:
            raise ToolExecutionError(
                "Invalid input format. Expected: number * number",
                tool_name=self.name,
            )
        left, right = (int(group) for group in match.groups())
        return str(left * right)
