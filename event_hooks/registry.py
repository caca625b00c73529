"""Hook registry module.

Keeps the registered event hooks together with the processes each one has
spawned, so that a re-triggered event, a configuration reload or host
shutdown can terminate them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import subprocess
import threading
from types import TracebackType
from typing import Any

from event_hooks.executor import resolve_command, spawn_process, terminate_process
from event_hooks.types import HookDefinition, HookEvent, SplitMode, validate_hooks

logger = logging.getLogger(__name__)


@dataclass
class EventHook:
    """A registered hook and the processes it currently has running."""

    definition: HookDefinition
    processes: set[subprocess.Popen] = field(default_factory=set)


class HookRegistry:
    """Spawns hook commands in response to lifecycle events.

    None of the public methods raise: a misbehaving hook is logged and never
    interrupts the host. Termination is best-effort, a SIGTERM is sent and
    the process is not waited on.

    Each spawned process gets a daemon watcher thread that drops it from its
    hook's live set once it exits. All live-set mutations happen under one
    lock.

    Example:
        registry = HookRegistry()
        registry.register_hooks([
            {"on": ["sessionStart", "sessionEnd"], "spawn": "notify-send session"},
        ])
        registry.trigger_event(HookEvent.SESSION_START)
        ...
        registry.cleanup_all()
    """

    def __init__(
        self,
        working_directory: str | Path | None = None,
        *,
        split_mode: SplitMode = "space",
    ) -> None:
        """Initialize the registry.

        Args:
            working_directory: Directory hook processes run in. Defaults to
                the current working directory at construction time.
            split_mode: How single-line commands are tokenized.
        """
        self.working_directory = (
            str(working_directory) if working_directory is not None else os.getcwd()
        )
        self.split_mode = split_mode
        self._hooks: list[EventHook] = []
        self._lock = threading.RLock()

    @property
    def hooks(self) -> tuple[HookDefinition, ...]:
        """The registered hook definitions, in registration order."""
        with self._lock:
            return tuple(hook.definition for hook in self._hooks)

    def register_hooks(
        self, configs: Iterable[HookDefinition | Mapping[str, Any]]
    ) -> None:
        """Replace the registered hooks.

        Processes spawned under the previous hooks are terminated first.
        Configuration entries that fail validation are logged and skipped.
        """
        self.cleanup_all()

        definitions = validate_hooks(configs)
        with self._lock:
            self._hooks = [EventHook(definition) for definition in definitions]
        logger.debug(f"Registered {len(definitions)} event hook(s)")

    def trigger_event(self, event: HookEvent | str) -> None:
        """Trigger all hooks that match the given event.

        Processes still running from the previous trigger of a matching hook
        are terminated before the new ones are spawned.
        """
        self._stop_previous_processes(event)

        for hook in self._matching_hooks(event):
            self._spawn_process(hook)

    def cleanup_all(self) -> None:
        """Terminate every tracked process across all hooks."""
        with self._lock:
            self._terminate(self._hooks)

    def has_hooks(self, event: HookEvent | str) -> bool:
        """Check if any registered hook is triggered by the event."""
        return bool(self._matching_hooks(event))

    def live_processes(
        self, event: HookEvent | str | None = None
    ) -> list[subprocess.Popen]:
        """Snapshot of tracked processes, optionally for one event only."""
        with self._lock:
            hooks = self._hooks if event is None else self._matching_hooks(event)
            return [process for hook in hooks for process in hook.processes]

    def _matching_hooks(self, event: HookEvent | str) -> list[EventHook]:
        with self._lock:
            return [hook for hook in self._hooks if hook.definition.matches(event)]

    def _stop_previous_processes(self, event: HookEvent | str) -> None:
        with self._lock:
            self._terminate(self._matching_hooks(event))

    def _terminate(self, hooks: Iterable[EventHook]) -> None:
        for hook in hooks:
            for process in hook.processes:
                terminate_process(process)
            hook.processes.clear()

    def _spawn_process(self, hook: EventHook) -> None:
        try:
            argv = resolve_command(hook.definition.command, self.split_mode)
            process = spawn_process(argv, self.working_directory, dict(os.environ))
        except Exception as e:
            logger.error(f"Failed to spawn event hook process: {e}")
            return

        with self._lock:
            hook.processes.add(process)

        watcher = threading.Thread(
            target=self._watch_process,
            args=(hook, process),
            name=f"event-hook-{process.pid}",
            daemon=True,
        )
        watcher.start()

    def _watch_process(self, hook: EventHook, process: subprocess.Popen) -> None:
        try:
            returncode = process.wait()
        except Exception as e:
            logger.error(f"Event hook process error: {e}")
        else:
            logger.debug(f"Event hook process {process.pid} exited with code {returncode}")
        finally:
            with self._lock:
                hook.processes.discard(process)

    def __enter__(self) -> HookRegistry:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup_all()
