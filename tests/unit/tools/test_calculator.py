"""Tests for the calculator tool."""

import pytest

from toolpick.core.errors import ToolExecutionError
from toolpick.tools import CalculatorTool


@pytest.mark.parametrize(
    ("tool_input", "expected"),
    [
        ("Calculate 15 * 24", "360"),
        ("15*24", "360"),
        ("what is 7   *   6?", "42"),
        ("0 * 99", "0"),
        ("12345678901234567890 * 10", "123456789012345678900"),
    ],
)
def test_multiplies_first_pair(tool_input, expected):
    """Product of the integers around '*' is returned as text."""
    assert CalculatorTool().run(tool_input) == expected


def test_only_first_match_used():
    """Later pairs in the input are ignored."""
    assert CalculatorTool().run("2 * 3 and then 4 * 5") == "6"


@pytest.mark.parametrize(
    "tool_input",
    ["What time is it?", "15 + 24", "", "* 3", "calculate fifteen * two"],
)
def test_unparseable_input_raises(tool_input):
    """Input without an 'int * int' pattern raises ToolExecutionError."""
    with pytest.raises(ToolExecutionError) as excinfo:
        CalculatorTool().run(tool_input)

    assert "Expected: number * number" in str(excinfo.value)
    assert excinfo.value.tool_name == "calculator"


def test_metadata():
    """Name and description match what the model is shown."""
    tool = CalculatorTool()
    assert tool.name == "calculator"
    assert tool.description == "Multiply two numbers (format: number * number)"
