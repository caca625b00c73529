"""Event hooks.

Run shell commands when the host application reaches a lifecycle event.
A process still running from the previous trigger of the same hook is
terminated before the hook is spawned again.

Example configuration in event_hooks.toml:

    [event_hooks]
    enabled = true

    [[event_hooks.hooks]]
    on = ["sessionStart", "sessionEnd"]
    spawn = "notify-send session"
    description = "Desktop notification"

    [[event_hooks.hooks]]
    on = "idle"
    spawn = ["say", "waiting for input"]

Commands given as a string are split on spaces. Give a list to pass
arguments that contain spaces.
"""
from __future__ import annotations

from event_hooks.config import (
    EventHooksConfig,
    EventHooksSettings,
    configure_logging,
    create_registry,
    load_config,
)
from event_hooks.executor import resolve_command, spawn_process, terminate_process
from event_hooks.registry import EventHook, HookRegistry
from event_hooks.types import (
    Argv,
    EventHooksError,
    HookCommand,
    HookConfigError,
    HookDefinition,
    HookEvent,
    ShellLine,
    SplitMode,
    validate_hooks,
)

__all__ = [
    "Argv",
    "EventHook",
    "EventHooksConfig",
    "EventHooksError",
    "EventHooksSettings",
    "HookCommand",
    "HookConfigError",
    "HookDefinition",
    "HookEvent",
    "HookRegistry",
    "ShellLine",
    "SplitMode",
    "configure_logging",
    "create_registry",
    "load_config",
    "resolve_command",
    "spawn_process",
    "terminate_process",
    "validate_hooks",
]
