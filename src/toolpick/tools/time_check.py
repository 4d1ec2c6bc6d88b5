"""Clock tool."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from toolpick.tools.execution import log_tool_execution


@dataclass(frozen=True)
class TimeCheckTool:
    """Reports the current local time as HH:MM:SS (24-hour)."""

    name: ClassVar[str] = "time_check"
    description: ClassVar[str] = "Get the current time in HH:mm:ss format"

    clock: Callable[[], datetime] = field(default=datetime.now)

    @log_tool_execution
    def run(self, tool_input: str) -> str:  # noqa: ARG002
        return self.clock().strftime("%H:%M:%S")
