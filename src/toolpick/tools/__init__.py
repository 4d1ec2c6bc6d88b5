"""Tools the assistant can dispatch a query to."""

from toolpick.tools.base import Tool
from toolpick.tools.calculator import CalculatorTool
from toolpick.tools.execution import log_tool_execution
from toolpick.tools.registry import ToolRegistry
from toolpick.tools.time_check import TimeCheckTool


def default_tools() -> list[Tool]:
    """Built-in tools in listing order.

    To add a tool, write a class with `name`, `description` and a
    `run(tool_input)` decorated with `log_tool_execution`, then add
    an instance here.
    """
    return [TimeCheckTool(), CalculatorTool()]


__all__ = [
    "Tool",
    "ToolRegistry",
    "TimeCheckTool",
    "CalculatorTool",
    "default_tools",
    "log_tool_execution",
]
