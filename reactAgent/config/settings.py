"""Configuration read from the environment and an optional ``.env`` file.

Each group reads its own variables; ``Settings`` nests the groups.

Example:
    from reactAgent.config.settings import get_settings

    settings = get_settings()
    endpoint = settings.model.endpoint
    max_iterations = settings.orchestration.max_iterations
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class ModelEndpointSettings(BaseSettings):
    """Chat endpoint location and request parameters.

    - OLLAMA_URL / MODEL_ENDPOINT: base URL of the chat server
    - OLLAMA_MODEL / MODEL_NAME: default model identifier
    - MODEL_REQUEST_TIMEOUT_MS: per-request timeout (default 300000 ms)
    """

    endpoint: str = Field(
        default="http://localhost:11434",
        validation_alias=AliasChoices("OLLAMA_URL", "MODEL_ENDPOINT"),
    )
    model: str = Field(
        default="llama3.1",
        validation_alias=AliasChoices("OLLAMA_MODEL", "MODEL_NAME"),
    )
    request_timeout_ms: int = Field(
        default=300_000,
        ge=1_000,
        validation_alias=AliasChoices("MODEL_REQUEST_TIMEOUT_MS"),
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, alias="MODEL_TEMPERATURE")
    top_p: float = Field(default=0.9, ge=0.0, le=1.0, alias="MODEL_TOP_P")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class OrchestrationSettings(BaseSettings):
    """Dialogue loop limits and step policies.

    - max_iterations: outer loop budget (default: 20)
    - reflection_threshold: consecutive failures before reflecting (default: 3)
    - step_max_retries: attempts per plan step and engine call (default: 3)
    - retry_backoff_base: seconds, delay before attempt n is base**n (default: 2.0)
    - dependency_gate: "attempted" (gate-by-attempt) or "succeeded"
    """

    max_iterations: int = Field(default=20, ge=1, le=500, alias="MAX_ITERATIONS")
    reflection_threshold: int = Field(default=3, ge=1, le=50, alias="REFLECTION_THRESHOLD")
    step_max_retries: int = Field(default=3, ge=1, le=10, alias="STEP_MAX_RETRIES")
    retry_backoff_base: float = Field(default=2.0, ge=0.0, alias="RETRY_BACKOFF_BASE")
    dependency_gate: Literal["attempted", "succeeded"] = Field(
        default="attempted", alias="DEPENDENCY_GATE"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class ToolSettings(BaseSettings):
    """Local toolkit limits.

    ``workspace_root()`` builds a fresh ToolSettings on every call, so
    AGENT_WORKSPACE_PATH can be pointed at a temporary directory in tests.
    """

    workspace_path: Optional[str] = Field(default=None, alias="AGENT_WORKSPACE_PATH")
    command_timeout: int = Field(default=120, ge=1, le=3600, alias="COMMAND_TIMEOUT")
    max_read_chars: int = Field(default=100_000, ge=1_000, alias="MAX_READ_CHARS")
    search_max_results: int = Field(default=50, ge=1, le=1000)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_prompt_max_length: int = Field(default=500, ge=100, le=5000, alias="LOG_PROMPT_MAX_LENGTH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class Settings(BaseSettings):
    """All configuration groups.

    - model: Chat endpoint and request parameters (ModelEndpointSettings)
    - orchestration: Loop budget and retry policy (OrchestrationSettings)
    - tools: Local toolkit limits (ToolSettings)
    - observability: Logging (ObservabilitySettings)
    """

    model: ModelEndpointSettings = Field(default_factory=ModelEndpointSettings)
    orchestration: OrchestrationSettings = Field(default_factory=OrchestrationSettings)
    tools: ToolSettings = Field(default_factory=ToolSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings are read once per process; tests build ``Settings(...)`` directly."""
    return Settings()
