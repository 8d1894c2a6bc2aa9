"""Expansion of target descriptors into concrete paths for git queries."""

import glob
import logging
import os
import stat
from collections.abc import Iterable
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import (
    DirectoryReadError,
    EmptyResolutionError,
    InvalidGlobError,
    NoMatchError,
    PathNotFoundError,
)

logger = logging.getLogger(__name__)

# Characters that make a target path a glob pattern
GLOB_CHARS = ("*", "?", "[")


class PathTarget(BaseModel):
    """A file, directory or glob pattern to include in the version query."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="File, directory or glob pattern")
    include_subdirs: bool = Field(
        default=False,
        description="For directories, include the whole subtree rather than "
        "only the files directly inside it",
    )

    @field_validator("path", mode="before")
    @classmethod
    def coerce_pathlike(cls, v):
        """Accept pathlib.Path and other os.PathLike values."""
        if isinstance(v, os.PathLike):
            return os.fspath(v)
        return v


def is_glob(path: str) -> bool:
    """Return True if path contains shell glob metacharacters."""
    return any(c in path for c in GLOB_CHARS)


def _check_glob_syntax(pattern: str) -> None:
    """
    Reject bracket expressions that are never closed.

    glob.glob would treat an unterminated '[' as a literal character.
    Brackets cannot span path separators because glob matches one
    component at a time.
    """
    for segment in pattern.split(os.sep):
        i = 0
        while i < len(segment):
            if segment[i] != "[":
                i += 1
                continue
            j = i + 1
            if j < len(segment) and segment[j] in "!^":
                j += 1
            # A ']' directly after the opening bracket is literal
            if j < len(segment) and segment[j] == "]":
                j += 1
            close = segment.find("]", j)
            if close == -1:
                raise InvalidGlobError(pattern, f"unterminated '[' in {segment!r}")
            i = close + 1


def _expand_glob(pattern: str) -> list[str]:
    _check_glob_syntax(pattern)
    matches = sorted(glob.glob(pattern))
    if not matches:
        raise NoMatchError(pattern)
    return matches


def _list_directory_files(directory: str) -> list[str]:
    """List the non-directory entries directly inside directory, sorted by name."""
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
            return [
                os.path.normpath(os.path.join(directory, e.name))
                for e in entries
                if not e.is_dir(follow_symlinks=False)
            ]
    except OSError as e:
        raise DirectoryReadError(directory, e.strerror or str(e)) from e


def _resolve_match(path: str, include_subdirs: bool) -> list[str]:
    try:
        st = os.stat(path)
    except OSError as e:
        raise PathNotFoundError(path, e.strerror or str(e)) from e

    if not stat.S_ISDIR(st.st_mode):
        return [path]
    if include_subdirs:
        # git log treats a directory argument as the whole subtree
        return [path]
    return _list_directory_files(path)


def resolve_targets(targets: Optional[Iterable[PathTarget]] = None) -> list[str]:
    """
    Resolve target descriptors into a flat, ordered list of paths.

    Globs are expanded, directories are either passed through whole
    (include_subdirs=True) or replaced by the files directly inside them.
    Order follows the input targets, then sorted match order within each
    target. Duplicates produced by overlapping targets are kept.

    Args:
        targets: Target descriptors (default: the current directory)

    Returns:
        List of file and directory paths

    Raises:
        InvalidGlobError: If a glob pattern is malformed
        NoMatchError: If a glob pattern matches nothing
        PathNotFoundError: If a path cannot be stat'd
        DirectoryReadError: If a directory cannot be listed
        EmptyResolutionError: If nothing is left to inspect
    """
    targets = list(targets or [])
    if not targets:
        targets = [PathTarget(path=".")]

    resolved: list[str] = []
    for target in targets:
        path = os.path.normpath(target.path)

        if is_glob(path):
            matches = _expand_glob(path)
        else:
            matches = [path]

        expanded: list[str] = []
        for match in matches:
            expanded.extend(_resolve_match(match, target.include_subdirs))

        logger.debug(
            "Target %s (include_subdirs=%s) -> %d path(s)",
            path,
            target.include_subdirs,
            len(expanded),
        )
        resolved.extend(expanded)

    if not resolved:
        raise EmptyResolutionError()

    return resolved
