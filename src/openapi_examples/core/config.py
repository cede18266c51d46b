"""Configuration management for openapi-examples.

Settings are resolved once, when examples are installed into an
application, from (lowest priority first):

1. A YAML file - either its ``openapi_examples:`` section or the whole file.
   ``${VAR}`` placeholders are substituted from the environment.
2. An explicit configuration dictionary.
3. ``OPENAPI_EXAMPLES_*`` environment variables (``.env`` files are loaded
   via python-dotenv).

Example:
    # openapi-examples.yaml
    openapi_examples:
      naming: camel_case
      xml_indent: 2
      exclude_none: true

    settings = load_settings(config_path=Path("openapi-examples.yaml"))
"""

import os
import re
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError
from .logging import get_logger
from .serialization import NamingPolicy

logger = get_logger(__name__)

# Prefix for environment variable overrides
ENV_PREFIX = "OPENAPI_EXAMPLES_"

# Top-level YAML section holding the settings
CONFIG_SECTION = "openapi_examples"

# Pattern for ${VAR_NAME} placeholders
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class ExamplesSettings(BaseModel):
    """Library-wide settings for example generation."""

    enabled: bool = True
    naming: NamingPolicy = NamingPolicy.PRESERVE
    # JSON examples are embedded as structured data, so only XML is indented
    xml_indent: Optional[int] = Field(default=None, ge=0)
    exclude_none: bool = False
    xml_root_name: Optional[str] = None
    include_annotations: bool = True
    include_providers: bool = True

    model_config = {"frozen": True, "extra": "forbid"}


def load_settings(
    config_path: Optional[Path] = None,
    config_dict: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> ExamplesSettings:
    """Load settings from a YAML file or dict, plus environment overrides.

    Args:
        config_path: Path to a YAML configuration file
        config_dict: Configuration dictionary (alternative to file)
        env: Environment mapping (default: os.environ after loading .env)

    Returns:
        Validated ExamplesSettings

    Raises:
        ConfigError: If both sources are given, the file cannot be read,
            or the values are invalid

    Example:
        settings = load_settings(config_dict={"naming": "camel_case"})
        settings = load_settings(env={"OPENAPI_EXAMPLES_XML_INDENT": "2"})
    """
    if config_path and config_dict:
        raise ConfigError("Provide either config_path or config_dict, not both")

    if env is None:
        _load_env_file()
        env = os.environ

    raw: dict[str, Any] = {}
    if config_path:
        raw = _load_yaml(Path(config_path), env)
    elif config_dict:
        raw = dict(config_dict)

    raw.update(_env_overrides(env))

    try:
        settings = ExamplesSettings(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    logger.debug(f"Loaded settings: {settings.model_dump()}")
    return settings


def _load_env_file(env_file: Optional[Path] = None) -> None:
    """Load OPENAPI_EXAMPLES_* variables from a .env file (default: ./.env).

    Variables already set in the environment take precedence.
    """
    if env_file is None:
        env_file = Path.cwd() / ".env"

    if env_file.exists():
        logger.debug(f"Loading environment variables from {env_file}")
        load_dotenv(env_file, override=False)


def _load_yaml(path: Path, env: Mapping[str, str]) -> dict[str, Any]:
    """Load the settings section of a YAML configuration file."""
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")

    section = data.get(CONFIG_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' in {path} must be a mapping")

    return {key: _substitute(value, env) for key, value in section.items()}


def _substitute(value: Any, env: Mapping[str, str]) -> Any:
    """Replace ${VAR} placeholders; unset variables keep their placeholder."""
    if not isinstance(value, str):
        return value

    def replace(match: re.Match) -> str:
        return env.get(match.group(1), match.group(0))

    return ENV_VAR_PATTERN.sub(replace, value)


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides = {}
    for name in ExamplesSettings.model_fields:
        value = env.get(ENV_PREFIX + name.upper())
        if not value:
            continue
        overrides[name] = value
    return overrides
