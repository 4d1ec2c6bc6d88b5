"""Tests for the query processor and its dispatch policies."""

import asyncio
import warnings
from dataclasses import dataclass
from typing import ClassVar

import pytest

from toolpick.core.config import DispatchConfig, FailurePolicy, SelectionPolicy
from toolpick.core.errors import SelectionError, ToolExecutionError
from toolpick.tools import ToolRegistry, log_tool_execution
from toolpick.workflow.processor import QueryProcessor

QUERY = "What time is it and calculate 15 * 24?"


@dataclass(frozen=True)
class EchoTool:
    name: ClassVar[str] = "echo"
    description: ClassVar[str] = "Repeats the query"

    @log_tool_execution
    def run(self, tool_input: str) -> str:
        return tool_input


def _process(processor: QueryProcessor, query: str = QUERY) -> str:
    return asyncio.run(processor.process(query))


def test_selected_tools_run_in_selection_order(registry, fake_client):
    """Only named tools run, in the order the model listed them."""
    processor = QueryProcessor(registry, fake_client("calculator\ntime_check"))

    assert _process(processor) == "360\n09:05:03"

    state = processor.last_state
    assert state.status == "complete"
    assert state.selected_tools == ["calculator", "time_check"]
    assert [step.tool_name for step in state.steps] == [
        "calculator", "time_check",
    ]


def test_prompt_sent_to_client(registry, fake_client):
    """The client receives the rendered selection prompt."""
    client = fake_client("calculator")
    _process(QueryProcessor(registry, client))

    assert len(client.prompts) == 1
    assert f"User input: {QUERY}" in client.prompts[0]
    assert "- calculator:" in client.prompts[0]


def test_custom_prompt_template(registry, fake_client):
    """A configured template replaces the default prompt."""
    client = fake_client("calculator")
    processor = QueryProcessor(
        registry, client, prompt_template="{input} || {tools}"
    )
    _process(processor, "2 * 2")

    assert client.prompts[0].startswith("2 * 2 || - time_check")


def test_unknown_names_skipped(registry, fake_client):
    """Names missing from the registry are silently skipped."""
    processor = QueryProcessor(
        registry, fake_client("weather\ncalculator\nTime_Check")
    )
    assert _process(processor) == "360"


def test_duplicate_names_run_twice(registry, fake_client):
    """Selections are not deduplicated."""
    processor = QueryProcessor(registry, fake_client("calculator\ncalculator"))
    assert _process(processor) == "360\n360"


def test_every_tool_gets_original_query(fake_client):
    """Tools receive the raw query, not anything the model implied."""
    registry = ToolRegistry([EchoTool()])
    processor = QueryProcessor(registry, fake_client("echo: say hi\necho"))

    assert _process(processor, "raw query") == "raw query"
    assert processor.last_state.steps[0].tool_input == "raw query"


def test_no_match_gives_empty_output(registry, fake_client):
    """Nothing matched is an empty result, not an error."""
    processor = QueryProcessor(registry, fake_client("nothing useful"))

    assert _process(processor) == ""
    assert processor.last_state.status == "complete"


def test_run_all_policy_end_to_end(registry, fake_client):
    """'all' runs every tool in registry order whatever was selected."""
    processor = QueryProcessor(
        registry,
        fake_client("calculator"),
        dispatch=DispatchConfig(selection=SelectionPolicy.ALL),
    )

    output = _process(processor)

    assert output.splitlines() == ["09:05:03", "360"]
    assert processor.last_state.selected_tools == ["calculator"]


def test_run_all_policy_accepts_plain_strings(registry, fake_client):
    """Policies validate from their YAML spelling."""
    dispatch = DispatchConfig.model_validate(
        {"selection": "all", "on_tool_failure": "lenient"}
    )
    assert dispatch.selection is SelectionPolicy.ALL
    assert dispatch.on_tool_failure is FailurePolicy.LENIENT

    processor = QueryProcessor(
        registry, fake_client("calculator"), dispatch=dispatch
    )
    assert _process(processor, "no numbers") == "09:05:03"


def test_strict_failure_aborts(registry, fake_client):
    """Under 'strict' the first failure propagates with no output."""
    processor = QueryProcessor(
        registry, fake_client("time_check\ncalculator\ntime_check")
    )

    with pytest.raises(ToolExecutionError):
        _process(processor, "What time is it?")

    state = processor.last_state
    assert state.status == "failed"
    assert state.output == ""
    # The third selection never ran
    assert [step.tool_name for step in state.steps] == [
        "time_check", "calculator",
    ]
    assert state.steps[1].error is not None


def test_lenient_failure_skips_tool(registry, fake_client):
    """Under 'lenient' failing tools contribute nothing."""
    processor = QueryProcessor(
        registry,
        fake_client("calculator\ntime_check"),
        dispatch=DispatchConfig(on_tool_failure=FailurePolicy.LENIENT),
    )

    assert _process(processor, "What time is it?") == "09:05:03"

    steps = processor.last_state.steps
    assert steps[0].output is None
    assert "Expected: number * number" in steps[0].error
    assert steps[1].output == "09:05:03"


def test_lenient_all_failures_gives_empty_output(registry, fake_client):
    """If every tool fails leniently the result is empty."""
    processor = QueryProcessor(
        registry,
        fake_client("calculator"),
        dispatch=DispatchConfig(on_tool_failure=FailurePolicy.LENIENT),
    )
    assert _process(processor, "no numbers") == ""


def test_selection_error_propagates(registry, fake_client):
    """Client failures abort before any tool runs."""
    processor = QueryProcessor(
        registry, fake_client(error=SelectionError("LLM unavailable"))
    )

    with pytest.raises(SelectionError):
        _process(processor)

    assert processor.last_state.status == "failed"
    assert processor.last_state.steps == []


def test_same_selection_same_output(registry, fake_client):
    """Repeated runs with the same selection give the same output."""
    processor = QueryProcessor(registry, fake_client("time_check\ncalculator"))
    assert _process(processor) == _process(processor)


@pytest.mark.parametrize("answer", ["", "  \n\t\n "])
def test_blank_selection_is_error(registry, fake_client, answer):
    """An empty or whitespace-only answer fails before dispatch."""
    processor = QueryProcessor(registry, fake_client(answer))

    with pytest.raises(SelectionError):
        _process(processor)

    assert processor.last_state.status == "failed"
    assert processor.last_state.steps == []


def test_client_exception_wrapped_as_selection_error(registry, fake_client):
    """Non-toolpick client errors surface as SelectionError."""
    processor = QueryProcessor(
        registry, fake_client(error=ConnectionError("down"))
    )

    with pytest.raises(SelectionError) as excinfo:
        _process(processor)

    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert "down" in str(excinfo.value)
    assert processor.last_state.status == "failed"


def test_braces_in_query_are_not_log_fields(registry, fake_client):
    """A query containing {braces} is logged and answered normally."""
    processor = QueryProcessor(registry, fake_client("calculator"))

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        assert _process(processor, "what is {x} 3 * 4") == "12"

    assert not [w for w in caught if "{x}" in str(w.message)]
