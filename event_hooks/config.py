"""Event hooks configuration module.

Loads hook definitions and registry options from a TOML file, with
environment variable overrides.
"""

from __future__ import annotations

import logging
from pathlib import Path
import tomllib
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from event_hooks.registry import HookRegistry
from event_hooks.types import HookConfigError, HookDefinition, SplitMode, validate_hooks

logger = logging.getLogger(__name__)

EVENT_HOOKS_CONFIG_FILENAMES = ("event_hooks.toml", "config.toml")
DEFAULT_CONFIG_DIR = Path.home() / ".event_hooks"
CONFIG_TABLE = "event_hooks"


class EventHooksConfig(BaseModel):
    """Configuration for event hooks"""

    enabled: bool = Field(default=True, description="Enable/disable all event hooks")

    working_directory: str | None = Field(
        default=None,
        description="Directory hook processes run in (defaults to the current directory)",
    )

    split_mode: SplitMode = Field(
        default="space",
        description="How single-line commands are tokenized: 'space' or 'shlex'",
    )

    log_level: str = Field(default="INFO", description="Log level for event hooks")

    hooks: list[HookDefinition] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @field_validator("hooks", mode="before")
    @classmethod
    def _drop_invalid_hooks(cls, value: Any) -> Any:
        if isinstance(value, list):
            return validate_hooks(value)
        return value


class EventHooksSettings(BaseSettings):
    """Settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="EVENT_HOOKS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool | None = Field(
        default=None, description="Enable event hooks (EVENT_HOOKS_ENABLED)"
    )

    working_directory: str | None = Field(
        default=None,
        description="Hook working directory (EVENT_HOOKS_WORKING_DIRECTORY)",
    )

    split_mode: SplitMode | None = Field(
        default=None, description="Command split mode (EVENT_HOOKS_SPLIT_MODE)"
    )

    log_level: str | None = Field(
        default=None, description="Log level (EVENT_HOOKS_LOG_LEVEL)"
    )

    config_path: Path | None = Field(
        default=None, description="Config file path (EVENT_HOOKS_CONFIG_PATH)"
    )


def _load_config_file(path: Path) -> dict[str, Any]:
    """Load the event hooks table from a TOML config file"""
    if not path.exists():
        return {}

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as e:
        raise HookConfigError(str(path), str(e)) from e
    except OSError as e:
        raise HookConfigError(str(path), f"cannot be read: {e}") from e

    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise HookConfigError(str(path), f"'{CONFIG_TABLE}' must be a table")
    return table


def _find_config_file() -> Path | None:
    for candidate in EVENT_HOOKS_CONFIG_FILENAMES:
        candidate_path = DEFAULT_CONFIG_DIR / candidate
        if candidate_path.exists():
            return candidate_path
    return None


def load_config(
    *,
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> EventHooksConfig:
    """Load configuration following priority: overrides > env > config file > defaults"""
    try:
        env_settings = EventHooksSettings()
    except ValidationError as e:
        raise HookConfigError("<env>", str(e)) from e

    selected_path = config_path or env_settings.config_path or _find_config_file()

    values: dict[str, Any] = {}
    if selected_path:
        values.update(_load_config_file(selected_path))

    values.update(env_settings.model_dump(exclude_none=True, exclude={"config_path"}))
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return EventHooksConfig.model_validate(values)
    except ValidationError as e:
        raise HookConfigError(str(selected_path or "<defaults>"), str(e)) from e


def configure_logging(level: str = "INFO") -> None:
    """Set up Python logging for event hooks"""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("event_hooks").setLevel(level.upper())


def create_registry(config: EventHooksConfig) -> HookRegistry:
    """Build a registry from a configuration and register its hooks.

    Also applies the configured log level to the event hooks loggers.
    """
    configure_logging(config.log_level)
    registry = HookRegistry(config.working_directory, split_mode=config.split_mode)
    if config.enabled:
        registry.register_hooks(config.hooks)
    else:
        logger.info("Event hooks disabled by configuration")
    return registry
