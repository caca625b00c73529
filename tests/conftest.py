from __future__ import annotations

from collections.abc import Callable, Iterator
import logging
from pathlib import Path
import time

import pytest

from event_hooks.registry import HookRegistry


def _wait_for(
    predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.05
) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def wait_for() -> Callable[..., bool]:
    return _wait_for


@pytest.fixture
def registry(tmp_path: Path) -> Iterator[HookRegistry]:
    hook_registry = HookRegistry(tmp_path)
    yield hook_registry
    hook_registry.cleanup_all()


@pytest.fixture(autouse=True)
def _isolate_event_hooks_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    for name in (
        "EVENT_HOOKS_ENABLED",
        "EVENT_HOOKS_WORKING_DIRECTORY",
        "EVENT_HOOKS_SPLIT_MODE",
        "EVENT_HOOKS_LOG_LEVEL",
        "EVENT_HOOKS_CONFIG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        "event_hooks.config.DEFAULT_CONFIG_DIR", tmp_path / "no-config-dir"
    )


@pytest.fixture(autouse=True)
def _restore_event_hooks_log_level() -> Iterator[None]:
    package_logger = logging.getLogger("event_hooks")
    previous = package_logger.level
    yield
    package_logger.setLevel(previous)
