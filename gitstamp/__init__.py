"""gitstamp - commit date and hash provenance for build artifacts."""

__version__ = "0.1.0"

from .core.errors import GitstampError
from .core.resolver import PathTarget, resolve_targets
from .core.sync import SyncStatus, assert_branch_is_clean_and_synced, check_branch_sync
from .core.version import VersionMetadata, get_version_metadata, query_version

__all__ = [
    "GitstampError",
    "PathTarget",
    "SyncStatus",
    "VersionMetadata",
    "assert_branch_is_clean_and_synced",
    "check_branch_sync",
    "get_version_metadata",
    "query_version",
    "resolve_targets",
]
