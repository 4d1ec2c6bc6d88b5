"""Language model client used for tool selection."""

from __future__ import annotations

import traceback
from typing import Protocol

import httpx
from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from toolpick.core.config import LLMConfig
from toolpick.core.errors import ConfigurationError, SelectionError
from toolpick.core.log import logger


class LanguageModelClient(Protocol):
    """Anything that turns a prompt into generated text."""

    async def generate(self, prompt: str) -> str:
        """Return the model's text answer to `prompt`.

        Raises:
            SelectionError: If the call fails or yields no text
        """
        ...


class AgentClient:
    """pydantic-ai backed client owning its HTTP connection pool.

    Use as an async context manager; the pool is opened on entry and
    closed on exit whether the body returns or raises:

        async with AgentClient(config.llm, api_key=key) as client:
            text = await client.generate(prompt)
    """

    def __init__(
        self,
        llm_config: LLMConfig,
        api_key: str | None = None,
        model: Model | None = None,
    ):
        """Initialize client.

        Args:
            llm_config: Model name, base URL, temperature, timeout
            api_key: Resolved API key for the provider
            model: Prebuilt pydantic-ai model; bypasses provider
                construction (tests pass TestModel/FunctionModel here)
        """
        self.llm_config = llm_config
        self.api_key = api_key
        self._model = model
        self._http: httpx.AsyncClient | None = None
        self._agent: Agent | None = None

    async def __aenter__(self) -> AgentClient:
        self._http = httpx.AsyncClient(timeout=self.llm_config.timeout)
        try:
            self._agent = Agent(
                self._model or self._create_model(),
                output_type=str,
                model_settings=ModelSettings(
                    temperature=self.llm_config.temperature,
                    timeout=self.llm_config.timeout,
                ),
            )
        except BaseException:
            await self.aclose()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        await self.aclose()
        return False

    async def aclose(self) -> None:
        """Release the HTTP connection pool. Safe to call twice."""
        self._agent = None
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()
            logger.debug("HTTP client closed")

    @property
    def is_open(self) -> bool:
        return self._http is not None and not self._http.is_closed

    def _create_model(self) -> Model:
        """Build an OpenAI-compatible chat model on our HTTP pool.

        Raises:
            ConfigurationError: For providers other than openai
        """
        provider_name, sep, model_name = self.llm_config.model.partition(":")
        if not sep:
            provider_name, model_name = "openai", provider_name
        if provider_name != "openai":
            raise ConfigurationError(
                f"Unsupported provider '{provider_name}'. Use 'openai:<model>'"
                f" with base_url for OpenAI-compatible endpoints"
            )

        provider = OpenAIProvider(
            api_key=self.api_key,
            base_url=self.llm_config.base_url,
            http_client=self._http,
        )
        return OpenAIChatModel(model_name, provider=provider)

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the text answer.

        Raises:
            RuntimeError: If called outside `async with`
            SelectionError: If the request fails or the answer is blank
        """
        if self._agent is None:
            raise RuntimeError("AgentClient is not open; use 'async with'")

        logger.debug(
            "Calling model {model}",
            model=self.llm_config.model,
            base_url=self.llm_config.base_url,
            prompt_length=len(prompt),
        )
        logger.trace("Prompt:\n{prompt}", prompt=prompt)

        try:
            result = await self._agent.run(prompt)
        except Exception as e:
            self._log_exception_debug_info(e)
            raise SelectionError(
                f"Failed to get tool selection from LLM: {e}"
            ) from e

        self._log_message_history(result.all_messages())

        text = result.output
        if not text or not text.strip():
            raise SelectionError("Failed to get tool selection from LLM")
        return text

    def _log_message_history(self, messages: list):
        """Log the conversation part by part at debug level."""
        logger.debug(
            "LLM conversation: {message_count} messages",
            message_count=len(messages),
        )
        for i, msg in enumerate(messages, 1):
            for part in getattr(msg, 'parts', []):
                part_type = type(part).__name__
                content = getattr(part, 'content', '')
                logger.debug(
                    "  Message {index} {part_type}: {content}",
                    index=i,
                    content=str(content),
                    part_type=part_type,
                    content_length=len(str(content)),
                )

    def _log_exception_debug_info(self, e: Exception):
        """Log a failed model call with its cause chain."""
        logger.error("LLM API call failed", _exc_info=e)
        logger.debug(
            "Exception traceback:\n{traceback}",
            traceback=''.join(
                traceback.format_exception(type(e), e, e.__traceback__)
            ),
        )

        cause = e.__cause__
        depth = 1
        while cause:
            logger.debug(
                "Exception cause chain (depth {depth}): {cause_type}: {cause}",
                depth=depth,
                cause_type=type(cause).__name__,
                cause=str(cause),
            )
            cause = cause.__cause__
            depth += 1
