"""Synchronous execution of configured commands.

The argv comes pre-split from config; nothing here goes through a shell
unless the configured argv itself names one.  The caller blocks until the
child exits (or the optional timeout kills it).  No retries.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class ProcessSpawnError(OSError):
    """The program could not be launched (missing binary, no permission, ...)."""

    def __init__(self, argv: Sequence[str], reason: str) -> None:
        super().__init__(f"Cannot run {argv[0]!r}: {reason}")
        self.argv = list(argv)
        self.reason = reason


class CommandTimeoutError(TimeoutError):
    """The command ran longer than allowed and was killed."""

    def __init__(self, argv: Sequence[str], timeout: float, stdout: bytes = b"") -> None:
        super().__init__(f"{argv[0]!r} timed out after {timeout}s")
        self.argv = list(argv)
        self.timeout = timeout
        self.stdout = stdout


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of one command run."""

    stdout: bytes
    stderr: bytes
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def execute_command(argv: Sequence[str], *, timeout: float | None = None) -> CommandOutput:
    """Run *argv* and capture its output.

    Raises:
        ProcessSpawnError: The program could not be started.
        CommandTimeoutError: *timeout* elapsed; the child has been killed.
    """
    if not argv:
        raise ProcessSpawnError([""], "empty argv")

    try:
        completed = subprocess.run(
            list(argv),
            capture_output=True,
            stdin=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandTimeoutError(argv, timeout or 0.0, exc.stdout or b"") from exc
    except OSError as exc:
        raise ProcessSpawnError(argv, exc.strerror or str(exc)) from exc

    if completed.stderr:
        logger.debug(
            "%s stderr: %s",
            argv[0],
            completed.stderr.decode("utf-8", errors="replace").rstrip(),
        )
    return CommandOutput(
        stdout=completed.stdout,
        stderr=completed.stderr,
        exit_code=completed.returncode,
    )
