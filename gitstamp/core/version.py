"""Latest-commit date and hash lookup for a set of paths."""

import logging
import os
from collections.abc import Iterable
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .backend import run_git
from .errors import (
    BackendQueryError,
    EmptyResolutionError,
    NoHistoryError,
    SuffixOverflowError,
)
from .resolver import PathTarget, resolve_targets

logger = logging.getLogger(__name__)

DATE_FORMAT_ARG = "--date=format:%Y-%m-%d"

# Prefix for variables written by VersionMetadata.to_env()
DEFAULT_ENV_PREFIX = "GITSTAMP_"


class VersionMetadata(BaseModel):
    """Date and short hash of the latest commit touching a path set."""

    commit_date: str = Field(
        ..., description="YYYY-MM-DD, with -<letter> suffix for busy days"
    )
    commit_hash: str = Field(..., description="Abbreviated commit hash")

    def astuple(self) -> tuple[str, str]:
        """Return (commit_date, commit_hash)."""
        return self.commit_date, self.commit_hash

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent)

    def to_yaml(self) -> str:
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def to_env(self, prefix: str = DEFAULT_ENV_PREFIX) -> str:
        """
        Render as KEY=value lines for sourcing in shells or CI env files.

        Example:
            GITSTAMP_COMMIT_DATE=2025-09-10
            GITSTAMP_COMMIT_HASH=1a2b3c4
        """
        return "".join(
            f"{prefix}{key.upper()}={value}\n"
            for key, value in self.model_dump().items()
        )

    @classmethod
    def from_json(cls, json_str: str) -> "VersionMetadata":
        return cls.model_validate_json(json_str)


def date_suffix(count: int, date: str = "") -> str:
    """
    Letter suffix for a date shared by count commits.

    One or two commits on a day get no suffix; the letters start at the
    third commit with 'b' (3 -> 'b', 4 -> 'c', ...). The numbering is
    fixed; do not shift it.

    Raises:
        SuffixOverflowError: If the letter would run past 'z'
    """
    if count <= 2:
        return ""
    letter = chr(ord("a") + count - 2)
    if letter > "z":
        raise SuffixOverflowError(date, count)
    return letter


def count_date_occurrences(history: str, date: str) -> int:
    """Count lines of git log date output equal to date."""
    return sum(1 for line in history.splitlines() if line.strip() == date)


def query_working_dir(first_path: str) -> str:
    """Directory to run git in: the path itself, or a file's parent."""
    if os.path.isdir(first_path):
        return first_path
    return os.path.dirname(first_path) or "."


def _git_log(cwd: str, query: str, options: list[str], paths: list[str]) -> str:
    result = run_git(["log", *options, "--", *paths], cwd=cwd)
    if not result.ok:
        raise BackendQueryError(query, result.output)
    return result.output


def query_version(resolved_paths: list[str]) -> VersionMetadata:
    """
    Query git for the latest commit touching any of the resolved paths.

    Args:
        resolved_paths: Output of resolve_targets()

    Returns:
        VersionMetadata with the (possibly suffixed) date and short hash

    Raises:
        EmptyResolutionError: If resolved_paths is empty
        BackendQueryError: If a git query fails
        NoHistoryError: If no commit touches the paths
        SuffixOverflowError: If the same-day count cannot be lettered
    """
    if not resolved_paths:
        raise EmptyResolutionError()

    cwd = query_working_dir(resolved_paths[0])
    # One absolute list feeds every query so the counts line up
    paths = [os.path.abspath(p) for p in resolved_paths]

    commit_hash = _git_log(cwd, "log hash", ["-n", "1", "--pretty=format:%h"], paths)
    if not commit_hash:
        raise NoHistoryError("log hash", paths)

    date = _git_log(
        cwd, "log date", ["-n", "1", DATE_FORMAT_ARG, "--pretty=format:%cd"], paths
    )
    history = _git_log(
        cwd, "log count", [DATE_FORMAT_ARG, "--pretty=format:%cd"], paths
    )

    count = count_date_occurrences(history, date)
    suffix = date_suffix(count, date)
    commit_date = f"{date}-{suffix}" if suffix else date

    logger.debug(
        "%s on %s (%d commit(s) that day) across %d path(s)",
        commit_hash,
        commit_date,
        count,
        len(paths),
    )
    return VersionMetadata(commit_date=commit_date, commit_hash=commit_hash)


def get_version_metadata(
    targets: Optional[Iterable[PathTarget]] = None,
) -> VersionMetadata:
    """
    Resolve targets and return the version metadata for them.

    Example:
        commit_date, commit_hash = get_version_metadata(
            [PathTarget(path="src", include_subdirs=True)]
        ).astuple()
    """
    resolved = resolve_targets(targets)
    logger.info("Inspecting %d path(s)", len(resolved))
    return query_version(resolved)
