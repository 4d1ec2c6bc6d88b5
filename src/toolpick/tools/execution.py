"""Execution logging for tools."""

from __future__ import annotations

import time
from functools import wraps

from toolpick.core.errors import ToolExecutionError
from toolpick.core.log import logger


def log_tool_execution(func):
    """Log every call of a tool's run() method.

    - BEFORE: tool name and input
    - ON SUCCESS: execution time and a preview of the output
    - ON ToolExecutionError: warning, re-raised unchanged
    - ON anything else: error with traceback, re-raised as
      ToolExecutionError so callers only handle one failure type
    """
    @wraps(func)
    def wrapper(self, tool_input: str) -> str:
        tool_name = self.name
        start_time = time.time()

        logger.info(
            "Tool '{tool_name}' invoked",
            tool_name=tool_name,
            tool_input=tool_input,
        )

        try:
            result = func(self, tool_input)
        except ToolExecutionError as e:
            logger.warning(
                "Tool '{tool_name}' failed: {error}",
                tool_name=tool_name,
                error=str(e),
                execution_time_ms=_elapsed_ms(start_time),
            )
            raise
        except Exception as e:
            logger.error(
                "Tool '{tool_name}' raised unexpected exception",
                tool_name=tool_name,
                execution_time_ms=_elapsed_ms(start_time),
                exception_type=type(e).__name__,
                _exc_info=e,
            )
            raise ToolExecutionError(
                f"{tool_name} failed: {e}", tool_name=tool_name
            ) from e

        logger.info(
            "Tool '{tool_name}' succeeded",
            tool_name=tool_name,
            execution_time_ms=_elapsed_ms(start_time),
            result_preview=result[:200],
        )
        logger.trace(
            "Tool '{tool_name}' full result:\n{result}",
            tool_name=tool_name,
            result=result,
        )
        return result

    return wrapper


def _elapsed_ms(start_time: float) -> float:
    return round((time.time() - start_time) * 1000, 2)
