"""Runs the external compiler and captures its combined output.

Cancellation and timeouts live here and nowhere else: the resolution
pipeline is plain local computation and is never interrupted.
"""

from __future__ import annotations

import pathlib
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import Optional, Sequence

import structlog

from protoset.config import settings
from protoset.errors import CompilationCancelledError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Combined stdout/stderr and exit status of one compiler run."""

    output: str
    exit_status: int


def run(
    executable: str,
    arguments: Sequence[str],
    cwd: Optional[pathlib.Path] = None,
    cancel_event: Optional[threading.Event] = None,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
) -> ExecutionResult:
    """Run *executable* with *arguments* and wait for it.

    Args:
        executable: Program to run.
        arguments: Arguments, not including the program itself.
        cwd: Working directory.
        cancel_event: Setting this event kills the process.
        timeout: Seconds before the process is killed.
        poll_interval: Seconds between cancellation checks.

    Returns:
        :class:`ExecutionResult`; a non-zero exit status is not an error here.

    Raises:
        CompilationCancelledError: The process was killed because of
            *cancel_event* or *timeout*.
        OSError: The process could not be started.
    """
    interval = poll_interval or settings.cancel_poll_interval
    deadline = time.monotonic() + timeout if timeout else None

    logger.debug("process_starting", executable=executable, args=len(arguments), cwd=str(cwd))
    process = subprocess.Popen(
        [executable, *arguments],
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
    )

    while True:
        try:
            output, _ = process.communicate(timeout=interval)
            break
        except subprocess.TimeoutExpired:
            if cancel_event is not None and cancel_event.is_set():
                reason = "cancelled"
            elif deadline is not None and time.monotonic() >= deadline:
                reason = f"timed out after {timeout}s"
            else:
                continue
            process.kill()
            output, _ = process.communicate()
            logger.warning("process_killed", executable=executable, reason=reason)
            raise CompilationCancelledError(output or "", reason)

    logger.debug("process_finished", executable=executable, exit_status=process.returncode)
    return ExecutionResult(output=output or "", exit_status=process.returncode)
