"""Tests for selection prompt construction and parsing."""

from toolpick.model.selector import build_selection_prompt, parse_selection


def test_prompt_embeds_tools_and_query(registry):
    """Default prompt lists every tool and the literal query."""
    query = "What time is it and calculate 15 * 24?"
    prompt = build_selection_prompt(registry, query)

    assert "- time_check: Get the current time in HH:mm:ss format" in prompt
    assert "- calculator: Multiply two numbers" in prompt
    assert f"User input: {query}" in prompt
    assert "Only respond with the tool names" in prompt


def test_prompt_custom_template(registry):
    """Custom templates fill {tools} and {input}."""
    prompt = build_selection_prompt(
        registry, "hi", template="T:\n{tools}\nQ: {input}"
    )
    assert prompt.startswith("T:\n- time_check")
    assert prompt.endswith("Q: hi")


def test_prompt_query_with_braces(registry):
    """Braces in the query are embedded verbatim."""
    prompt = build_selection_prompt(registry, "what is {x} * {y}")
    assert "User input: what is {x} * {y}" in prompt


def test_parse_trims_and_drops_blank_lines():
    """Names are trimmed; empty lines vanish; order is kept."""
    text = "  time_check  \n\n calculator\r\n   \n"
    assert parse_selection(text) == ["time_check", "calculator"]


def test_parse_keeps_duplicates_and_unknown_names():
    """No deduplication and no registry validation at this stage."""
    text = "calculator\nweather\ncalculator"
    assert parse_selection(text) == ["calculator", "weather", "calculator"]


def test_parse_empty():
    """Blank responses parse to an empty selection."""
    assert parse_selection("") == []
    assert parse_selection("\n  \n") == []
