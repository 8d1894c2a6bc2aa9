"""Synchronous git subprocess invocation for gitstamp."""

import logging
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional, Union

logger = logging.getLogger(__name__)

# Executable resolved on PATH for every backend call
GIT_EXECUTABLE = "git"

# Return code reported when git could not be spawned at all
SPAWN_FAILURE_RETURNCODE = 127


class GitResult(NamedTuple):
    """Outcome of one git invocation."""

    args: list[str]
    output: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_git(
    args: list[str], cwd: Optional[Union[str, Path]] = None
) -> GitResult:
    """
    Run git with the given arguments and capture its output.

    Standard output and standard error are merged into one buffer, which is
    returned trimmed whatever the exit status. Callers decide whether a
    non-zero exit is fatal.

    Args:
        args: Arguments passed after the git executable
        cwd: Working directory for the process (default: inherit caller's)

    Returns:
        GitResult with trimmed output and the process return code
    """
    cmd = [GIT_EXECUTABLE, *args]
    run_dir = str(cwd) if cwd else None
    logger.debug("Running: %s (cwd=%s)", " ".join(cmd), run_dir or ".")

    try:
        result = subprocess.run(
            cmd,
            cwd=run_dir,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        logger.debug("Could not start %s: %s", GIT_EXECUTABLE, e)
        return GitResult(list(args), str(e), SPAWN_FAILURE_RETURNCODE)

    output = (result.stdout or "").strip()
    if result.returncode != 0:
        logger.debug("git %s exited with %d", args[0] if args else "", result.returncode)

    return GitResult(list(args), output, result.returncode)
