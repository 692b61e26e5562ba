"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserConfig(BaseModel):
    """Compiler log parsing configuration."""

    context_lines: int = Field(5, ge=1, le=50, description="Lines scanned for l.<N> after '!'")
    warning_continuation_lines: int = Field(3, ge=0, le=20)
    warning_message_limit: int = Field(200, ge=20, le=2000)
    box_message_limit: int = Field(120, ge=20, le=2000)


class AnthropicConfig(BaseModel):
    """Anthropic-specific configuration."""

    api_key: str = Field(min_length=1)
    model: str = "claude-3-5-sonnet-20241022"
    max_tokens: int = 500
    temperature: float = 0.4


class OpenRouterConfig(BaseModel):
    """OpenRouter-specific configuration."""

    api_key: str = Field(min_length=1)
    model: str = "stepfun/step-3.5-flash:free"
    base_url: str = "https://openrouter.ai/api/v1"
    max_tokens: int = 500
    temperature: float = 0.4
    top_p: float = Field(0.9, gt=0.0, le=1.0)
    referer: str = "http://localhost:3000"
    title: str = "latex-repair"
    request_timeout: float = Field(60.0, gt=0.0, le=600.0)
    max_attempts: int = Field(3, ge=1, le=10)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an https endpoint."""
        if not v.startswith("https://"):
            raise ValueError("OpenRouter base_url must use https")
        return v.rstrip("/")


class AIConfig(BaseModel):
    """AI fallback configuration."""

    enabled: bool = False
    provider: Literal["anthropic", "openrouter"] = "openrouter"
    anthropic: AnthropicConfig | None = None
    openrouter: OpenRouterConfig | None = None
    timeout: float = Field(30.0, gt=0.0, le=300.0, description="Per-fix timeout in seconds")
    context_lines: int = Field(5, ge=0, le=50, description="Source lines sent around the error")


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("/var/log/latex-repair/repair.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    file: FileLoggingConfig = FileLoggingConfig()


class RepairConfig(BaseSettings):
    """Root configuration for latex-repair."""

    parser: ParserConfig = ParserConfig()
    ai: AIConfig = AIConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="LATEX_REPAIR_",
        env_file=".env",
        env_nested_delimiter="__",
    )
