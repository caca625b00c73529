"""Type definitions for event hooks.

An event hook binds one or more lifecycle events of the host application
to a command. Each time a matching event fires, the command is spawned as
a child process.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import StrEnum
import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

SplitMode = Literal["space", "shlex"]


class HookEvent(StrEnum):
    """Lifecycle events that can trigger hooks."""

    IDLE = "idle"
    CONFIRM = "confirm"
    RESPONDING = "responding"
    AFTER_AGENT = "afterAgent"
    BEFORE_TOOL = "beforeTool"
    AFTER_TOOL = "afterTool"
    SESSION_START = "sessionStart"
    SESSION_END = "sessionEnd"


class ShellLine(BaseModel):
    """A command given as a single line, tokenized before spawning."""

    model_config = {"frozen": True}

    kind: Literal["shell"] = "shell"
    line: str


class Argv(BaseModel):
    """A command given as an explicit argument vector."""

    model_config = {"frozen": True}

    kind: Literal["argv"] = "argv"
    args: tuple[str, ...] = Field(min_length=1)


HookCommand = Annotated[ShellLine | Argv, Field(discriminator="kind")]


class HookDefinition(BaseModel):
    """Configuration for a single event hook.

    Accepts the configuration shape ``{"on": ..., "spawn": ..., "description": ...}``
    as well as the field names directly.

    Attributes:
        triggers: Events that fire this hook. A single event name is accepted.
            Unknown names are logged and ignored; at least one known event
            must remain.
        command: What to spawn. A string becomes a ``ShellLine``, a list of
            strings becomes an ``Argv``.
        description: Optional free text.
    """

    model_config = {"populate_by_name": True, "frozen": True}

    triggers: frozenset[HookEvent] = Field(alias="on", min_length=1)
    command: HookCommand = Field(alias="spawn")
    description: str | None = None

    @field_validator("triggers", mode="before")
    @classmethod
    def _known_triggers(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set, frozenset)):
            return value

        known = {event.value for event in HookEvent}
        triggers = []
        for trigger in value:
            if isinstance(trigger, str) and trigger not in known:
                logger.warning(f"Ignoring unknown event hook trigger: {trigger!r}")
                continue
            triggers.append(trigger)
        return triggers

    @field_validator("command", mode="before")
    @classmethod
    def _tag_command(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"kind": "shell", "line": value}
        if isinstance(value, (list, tuple)):
            return {"kind": "argv", "args": value}
        return value

    def matches(self, event: HookEvent | str) -> bool:
        return any(trigger == event for trigger in self.triggers)


def validate_hooks(
    configs: Iterable[HookDefinition | Mapping[str, Any]],
) -> list[HookDefinition]:
    """Validate raw hook configurations, dropping the invalid ones.

    Invalid entries are logged as warnings rather than raised, so one bad
    hook never prevents the others from loading.

    Args:
        configs: Hook definitions or mappings in the configuration shape.

    Returns:
        The valid definitions, in input order.
    """
    definitions: list[HookDefinition] = []
    for index, config in enumerate(configs):
        if isinstance(config, HookDefinition):
            definitions.append(config)
            continue
        try:
            definitions.append(HookDefinition.model_validate(config))
        except ValidationError as e:
            logger.warning(f"Invalid event hook configuration at index {index}: {e}")
    return definitions


class EventHooksError(Exception):
    """Base class for event hook errors."""


class HookConfigError(EventHooksError):
    """Raised when an event hooks configuration file cannot be loaded."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Event hooks config '{path}' is invalid: {message}")
