"""Application state and configuration."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from toolpick.core.base import BaseConfig, BaseState
from toolpick.core.errors import ConfigurationError
from toolpick.core.log import Logger
from toolpick.core.yaml_settings import YamlWithIncludesSettingsSource

DEFAULT_SELECTION_PROMPT = """\
You are a helpful AI assistant that can use various tools to help users.
Based on the user's input, select the most appropriate tool(s) to use.

Available tools:
{tools}

User input: {input}

Select the most appropriate tool(s) to use. If multiple tools are needed, \
list each one on a new line.
Only respond with the tool names, nothing else.
"""

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================


class SelectionPolicy(str, Enum):
    """Which tools run after the language model has answered."""

    SELECTED = "selected"  # only tools the model named
    ALL = "all"            # every registered tool; selection is ignored


class FailurePolicy(str, Enum):
    """What a ToolExecutionError does to the rest of the dispatch."""

    STRICT = "strict"    # abort, no partial output
    LENIENT = "lenient"  # skip the tool, keep going


class LLMConfig(BaseConfig):
    """Language model provider settings."""

    model: str = Field(
        default="openai:gpt-4o-mini",
        description=(
            "Chat model, 'openai:<name>' or a bare name. Any "
            "OpenAI-compatible endpoint works with base_url"
        ),
    )
    api_key: str | None = Field(
        default=None,
        description="API key; read from api_key_env when unset",
    )
    api_key_env: str = Field(
        default="OPENAI_API_KEY",
        description="Environment variable holding the API key",
    )
    base_url: str | None = Field(
        default=None,
        description=(
            "Override API base URL for OpenAI-compatible endpoints "
            "(e.g., http://localhost:8080/v1)"
        ),
    )
    temperature: float = Field(
        default=0.8, description="Sampling temperature"
    )
    timeout: float = Field(
        default=60.0,
        description="Timeout for the model request in seconds",
    )

    def resolve_api_key(self) -> str:
        """Return the API key from config or environment.

        Raises:
            ConfigurationError: If neither provides a key
        """
        api_key = self.api_key or os.environ.get(self.api_key_env)
        if not api_key:
            raise ConfigurationError(
                f"{self.api_key_env} environment variable is not set"
            )
        return api_key


class DispatchConfig(BaseConfig):
    """Tool dispatch policies."""

    selection: SelectionPolicy = Field(
        default=SelectionPolicy.SELECTED,
        description=(
            "'selected' runs only tools the model named; 'all' runs "
            "every registered tool regardless of the selection"
        ),
    )
    on_tool_failure: FailurePolicy = Field(
        default=FailurePolicy.STRICT,
        description=(
            "'strict' aborts the query on the first tool failure; "
            "'lenient' skips the failing tool"
        ),
    )


class PromptsConfig(BaseConfig):
    """Prompt templates sent to the language model."""

    selection: str = Field(
        default=DEFAULT_SELECTION_PROMPT,
        description=(
            "Tool selection prompt; {tools} and {input} are replaced"
        ),
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance",
    )
    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="Language model settings",
    )
    dispatch: DispatchConfig = Field(
        default_factory=DispatchConfig,
        description="Tool dispatch policies",
    )
    prompts: PromptsConfig = Field(
        default_factory=PromptsConfig,
        description="Prompt templates",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir("toolpick"))
        ),
        description="Root directory for log files",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Install the global logger once configuration is loaded."""
        from toolpick.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger()

        setup_logger(
            log_root=self.log_root,
            run_name="toolpick",
            level=self.logger.level,
            console=self.logger.console,
            file=self.logger.file,
            logfire=self.logger.logfire,
        )
        return self

    def close(self):
        """Close the global logger, then every closeable section."""
        from toolpick.core.log import logger
        logger.close()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable while a query runs)
# ============================================================


class ToolStep(BaseModel):
    """One dispatched tool call."""

    tool_name: str
    tool_input: str
    output: str | None = None
    error: str | None = None


class QueryState(BaseState):
    """State of one query as it moves through the workflow graph."""

    query: str = Field(default="", description="Raw user query")
    prompt: str = Field(default="", description="Selection prompt sent")
    raw_selection: str = Field(
        default="", description="Unparsed model response"
    )
    selected_tools: list[str] = Field(
        default_factory=list,
        description="Tool names parsed from the model response",
    )
    steps: list[ToolStep] = Field(
        default_factory=list,
        description="Every tool call made, in dispatch order",
    )
    outputs: list[str] = Field(
        default_factory=list,
        description="Successful tool outputs, in dispatch order",
    )
    output: str = Field(default="", description="Joined final output")
    status: str = Field(
        default="pending",
        description="pending, running, complete, failed",
    )


class Runtime(BaseModel):
    """Runtime state of the process."""

    query: QueryState = Field(
        default_factory=QueryState,
        description="State of the most recent query",
    )


# ============================================================
# STATE (config + runtime combined)
# ============================================================


class State(BaseSettings):
    """Complete application state: configuration and runtime.

    Loads from YAML files, .env, environment variables
    (TOOLPICK_CONFIG__LLM__MODEL=...) and, through CliApp, the
    command line.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to merge over the defaults. "
            "Use --include on the command line or include: in YAML."
        ),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TOOLPICK_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority, highest first: init/CLI, env, .env, YAML, secrets.

        Environment variables sit above YAML so a single setting can be
        overridden without editing files.
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            file_secret_settings,
        )

    def close(self):
        """Close configuration (and with it the logger)."""
        self.config.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


__all__ = [
    "State",
    "Config",
    "LLMConfig",
    "DispatchConfig",
    "PromptsConfig",
    "SelectionPolicy",
    "FailurePolicy",
    "QueryState",
    "ToolStep",
    "DEFAULT_SELECTION_PROMPT",
]
