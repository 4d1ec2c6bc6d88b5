"""Pytest configuration and fixtures for toolpick tests."""

import os
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from toolpick.core.log import ConsoleSink, setup_logger
from toolpick.tools import CalculatorTool, TimeCheckTool, ToolRegistry


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging for the whole test session.

    Nothing is sent to logfire.dev and no log files are written.
    """
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "toolpick-tests",
        run_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory without API keys or TOOLPICK_ vars."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    for name in list(os.environ):
        if name.startswith("TOOLPICK_"):
            monkeypatch.delenv(name)
    return tmp_path


@pytest.fixture
def fixed_clock():
    """Clock frozen at 09:05:03."""
    return lambda: datetime(2024, 1, 2, 9, 5, 3)


@pytest.fixture
def registry(fixed_clock):
    """Registry with the built-in tools and a frozen clock."""
    return ToolRegistry([TimeCheckTool(clock=fixed_clock), CalculatorTool()])


class FakeClient:
    """LanguageModelClient returning a canned answer."""

    def __init__(self, answer: str = "", error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def fake_client():
    """Factory for FakeClient instances."""
    return FakeClient
