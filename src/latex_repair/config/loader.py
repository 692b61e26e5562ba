"""Load RepairConfig from a YAML file.

`${NAME}` placeholders anywhere in the file are replaced with environment
variables before parsing, so API keys never have to be written to disk.
"""

import os
import re
from pathlib import Path

import yaml

from .schema import RepairConfig

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(text: str) -> str:
    """Expand `${NAME}` placeholders from the environment.

    Raises:
        ValueError: Naming every placeholder whose variable is unset
    """
    missing = [name for name in _PLACEHOLDER.findall(text) if name not in os.environ]
    if missing:
        names = ", ".join(dict.fromkeys(missing))
        raise ValueError(f"Environment variable {names} not found")

    return _PLACEHOLDER.sub(lambda m: os.environ[m.group(1)], text)


def load_config(path: Path) -> RepairConfig:
    """Read, expand and validate a YAML configuration file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a placeholder is unset or sections are inconsistent
        pydantic.ValidationError: If values do not match the schema
    """
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    data = yaml.safe_load(substitute_env_vars(path.read_text())) or {}
    config = RepairConfig.model_validate(data)
    validate_config(config)
    return config


def validate_config(config: RepairConfig) -> None:
    """Check that an enabled AI fallback has its provider section.

    Raises:
        ValueError: If the selected provider is not configured
    """
    if not config.ai.enabled:
        return

    provider = config.ai.provider
    if getattr(config.ai, provider) is None:
        raise ValueError(f"{provider} provider selected but {provider} config missing")
