"""Exception hierarchy for gitstamp."""

from typing import Optional


class GitstampError(Exception):
    """Base class for every error raised by gitstamp."""


class ConfigError(GitstampError):
    """Stamp configuration file could not be read or validated."""


# Path resolution


class ResolutionError(GitstampError):
    """Target descriptors could not be turned into a path list."""


class InvalidGlobError(ResolutionError):
    """Glob pattern is malformed."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"invalid glob {pattern}: {reason}")


class NoMatchError(ResolutionError):
    """Glob pattern matched nothing."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(f"glob {pattern}: no matches")


class PathNotFoundError(ResolutionError):
    """Status lookup on a path failed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"stat {path}: {reason}")


class DirectoryReadError(ResolutionError):
    """Listing a directory failed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"read dir {path}: {reason}")


class EmptyResolutionError(ResolutionError):
    """Resolution produced no paths to inspect."""

    def __init__(self):
        super().__init__("no files to inspect")


# Version queries


class BackendQueryError(GitstampError):
    """A git query exited non-zero."""

    def __init__(self, query: str, output: str, message: Optional[str] = None):
        self.query = query
        self.output = output
        super().__init__(message or f"git {query}: {output or 'command failed'}")


class NoHistoryError(BackendQueryError):
    """Git knows no commit touching the requested paths."""

    def __init__(self, query: str, paths: list[str]):
        self.paths = paths
        super().__init__(
            query,
            "",
            message=f"git {query}: no commits found for {len(paths)} path(s)",
        )


class SuffixOverflowError(GitstampError):
    """Too many same-day commits to express as a single letter suffix."""

    def __init__(self, date: str, count: int):
        self.date = date
        self.count = count
        super().__init__(
            f"{count} commits on {date} exceed the single-letter suffix range"
        )


# Branch sync


class SyncError(GitstampError):
    """Working tree is not clean or not in sync with its remote."""


class FetchError(SyncError):
    """Fetching the remote tracking branch failed."""

    def __init__(self, remote: str, branch: str, output: str):
        self.remote = remote
        self.branch = branch
        self.output = output
        super().__init__(f"git fetch {remote} {branch} failed: {output}")


class UnexpectedOutputError(SyncError):
    """git rev-list printed something other than two counts."""

    def __init__(self, output: str):
        self.output = output
        super().__init__(f"unexpected output from git rev-list: {output!r}")


class BranchBehindError(SyncError):
    """Local branch lacks commits present on the remote."""

    def __init__(self, remote: str, branch: str, count: int):
        self.remote = remote
        self.branch = branch
        self.count = count
        super().__init__(
            f"your branch is behind {remote}/{branch} by {count} commit(s)"
        )


class BranchAheadError(SyncError):
    """Local branch has commits absent from the remote."""

    def __init__(self, remote: str, branch: str, count: int):
        self.remote = remote
        self.branch = branch
        self.count = count
        super().__init__(
            f"your branch is ahead of {remote}/{branch} by {count} commit(s)"
        )


class UncommittedChangesError(SyncError):
    """Working tree has modified or untracked files."""

    def __init__(self, entries: list[str]):
        self.entries = entries
        listing = "\n".join(entries)
        super().__init__(f"you have uncommitted changes:\n{listing}")
