"""Configuration loading and validation."""

from .loader import load_config, substitute_env_vars, validate_config
from .schema import (
    AIConfig,
    AnthropicConfig,
    FileLoggingConfig,
    LoggingConfig,
    OpenRouterConfig,
    ParserConfig,
    RepairConfig,
)

__all__ = [
    # Loader
    "load_config",
    "substitute_env_vars",
    "validate_config",
    # Root config
    "RepairConfig",
    # Top-level configs
    "AIConfig",
    "LoggingConfig",
    "ParserConfig",
    # Provider-specific configs
    "AnthropicConfig",
    "OpenRouterConfig",
    "FileLoggingConfig",
]
