"""Branch cleanliness and remote-sync checks."""

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field

from .backend import run_git
from .errors import (
    BackendQueryError,
    BranchAheadError,
    BranchBehindError,
    FetchError,
    SyncError,
    UncommittedChangesError,
    UnexpectedOutputError,
)

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


class SyncStatus(BaseModel):
    """Outcome of a branch sync check."""

    ok: bool = Field(..., description="Whether every check passed")
    branch: Optional[str] = Field(None, description="Current branch name")
    reason: Optional[str] = Field(None, description="Why the check failed")
    error_type: Optional[str] = Field(
        None, description="Exception class name for the failed check"
    )


def current_branch(cwd: Optional[Union[str, Path]] = None) -> str:
    result = run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd)
    if not result.ok:
        raise BackendQueryError("rev-parse", result.output)
    return result.output.strip()


def parse_left_right_counts(output: str) -> tuple[int, int]:
    """
    Parse `git rev-list --left-right --count` output.

    Returns:
        (behind, ahead) commit counts

    Raises:
        UnexpectedOutputError: Unless output is exactly two integers
    """
    parts = output.split()
    if len(parts) != 2:
        raise UnexpectedOutputError(output)
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as e:
        raise UnexpectedOutputError(output) from e


def assert_branch_is_clean_and_synced(
    cwd: Optional[Union[str, Path]] = None,
    remote: str = DEFAULT_REMOTE,
) -> None:
    """
    Check that the current branch matches its remote and the tree is clean.

    Fetches the remote branch (updating the local tracking ref), then checks
    in order: behind, ahead, uncommitted changes. Stops at the first problem.

    Args:
        cwd: Repository working directory (default: current directory)
        remote: Remote name to compare against

    Raises:
        BackendQueryError: If a git query fails
        FetchError: If fetching the remote branch fails
        UnexpectedOutputError: If ahead/behind counts cannot be parsed
        BranchBehindError: If the remote has commits the branch lacks
        BranchAheadError: If the branch has commits the remote lacks
        UncommittedChangesError: If the working tree is dirty
    """
    _check_branch(current_branch(cwd), cwd, remote)


def _check_branch(
    branch: str, cwd: Optional[Union[str, Path]], remote: str
) -> None:
    logger.debug("Checking branch %s against %s", branch, remote)

    fetch = run_git(["fetch", remote, branch, "--quiet"], cwd=cwd)
    if not fetch.ok:
        raise FetchError(remote, branch, fetch.output)

    counts = run_git(
        ["rev-list", "--left-right", "--count", f"{remote}/{branch}...{branch}"],
        cwd=cwd,
    )
    if not counts.ok:
        raise BackendQueryError("rev-list", counts.output)

    behind, ahead = parse_left_right_counts(counts.output)
    if behind != 0:
        raise BranchBehindError(remote, branch, behind)
    if ahead != 0:
        raise BranchAheadError(remote, branch, ahead)

    status = run_git(["status", "--porcelain"], cwd=cwd)
    if not status.ok:
        raise BackendQueryError("status", status.output)
    if status.output.strip():
        raise UncommittedChangesError(status.output.splitlines())

    logger.info("Branch %s is clean and in sync with %s", branch, remote)


def check_branch_sync(
    cwd: Optional[Union[str, Path]] = None,
    remote: str = DEFAULT_REMOTE,
) -> SyncStatus:
    """Run assert_branch_is_clean_and_synced() and report instead of raising."""
    branch = None
    try:
        branch = current_branch(cwd)
        _check_branch(branch, cwd, remote)
    except (SyncError, BackendQueryError) as e:
        return SyncStatus(
            ok=False, branch=branch, reason=str(e), error_type=type(e).__name__
        )
    return SyncStatus(ok=True, branch=branch)
