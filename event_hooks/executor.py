"""Hook executor module.

Turns hook commands into argument vectors, spawns them as child processes
sharing the host's standard streams, and delivers termination signals.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
import shlex
import subprocess

from event_hooks.types import Argv, HookCommand, SplitMode

logger = logging.getLogger(__name__)


def resolve_command(command: HookCommand, split_mode: SplitMode = "space") -> list[str]:
    """Resolve a hook command into an argument vector.

    A ``ShellLine`` is split on literal spaces: there is no quoting, so an
    argument containing a space cannot be expressed this way. Use an
    ``Argv`` command, or ``split_mode="shlex"``, for such arguments.

    Args:
        command: The command to resolve.
        split_mode: How to tokenize a ``ShellLine``.

    Returns:
        The executable followed by its arguments.

    Raises:
        ValueError: If the command resolves to nothing, or shlex cannot
            parse the line.
    """
    if isinstance(command, Argv):
        argv = list(command.args)
    elif split_mode == "shlex":
        argv = shlex.split(command.line)
    else:
        argv = command.line.split(" ")

    if not argv:
        raise ValueError(f"Hook command resolves to an empty argument list: {command!r}")
    return argv


def spawn_process(
    argv: Sequence[str], cwd: str, env: Mapping[str, str]
) -> subprocess.Popen:
    """Spawn a hook command with inherited stdin, stdout and stderr.

    Raises:
        OSError: If the executable is missing or cannot be run.
    """
    process = subprocess.Popen(list(argv), cwd=cwd, env=dict(env))
    logger.debug(f"Spawned event hook process {process.pid}: {list(argv)}")
    return process


def terminate_process(process: subprocess.Popen) -> bool:
    """Send SIGTERM to a process without waiting for it to exit.

    Returns:
        True if the signal was delivered, False if the process had already
        been reaped or signalling failed.
    """
    if process.returncode is not None:
        return False
    try:
        process.terminate()
    except OSError as e:
        # Process might have already exited
        logger.warning(f"Failed to kill process {process.pid}: {e}")
        return False
    return True
