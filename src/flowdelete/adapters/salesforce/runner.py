"""Subprocess runner for the ``sf`` command line."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import cache
from logging import getLogger

from flowdelete.config import ConfigurationError

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    returncode: int
    stdout: str = ""
    stderr: str = ""


CommandRunner = Callable[[Sequence[str], float], CommandOutput]


@cache
def require_executable(executable: str) -> str:
    """Return the resolved path of ``executable``, checked once per process.

    Raises ``ConfigurationError`` when it cannot be found on ``PATH``.
    """

    resolved = shutil.which(executable)
    if resolved is None:
        raise ConfigurationError(f"Salesforce CLI executable {executable!r} was not found on PATH")
    log.debug("Using Salesforce CLI at %s", resolved)
    return resolved


def run_command(args: Sequence[str], timeout: float) -> CommandOutput:
    """Run ``args`` without a shell and capture its output.

    Raises ``ConfigurationError`` when the executable is not installed,
    ``subprocess.TimeoutExpired`` when ``timeout`` elapses and ``OSError``
    when the executable cannot be started.
    """

    require_executable(args[0])
    log.debug("Running %s", " ".join(args))
    completed = subprocess.run(  # noqa: S603
        list(args),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
        check=False,
    )
    return CommandOutput(
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
