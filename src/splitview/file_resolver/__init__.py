"""
Self-contained file discovery module with splitignore-aware directory walking.

No imports from `splitview` outside this package.

Usage::

    from splitview.file_resolver import FileDiscovery, load_split_ignore

    matcher = load_split_ignore(workspace)
    discovery = FileDiscovery(matcher, base_dir=workspace)
    result = discovery.collect_all(["src", "README.md"])
"""

from splitview.file_resolver.defaults import DEFAULT_WORKERS, IGNORE_FILE_NAME
from splitview.file_resolver.filesystem import (
    EntryKind,
    FileSystem,
    InMemoryFileSystem,
    LocalFileSystem,
)
from splitview.file_resolver.ignore_file import load_split_ignore
from splitview.file_resolver.patterns import IgnorePatterns, RuleKind, SplitIgnorePattern
from splitview.file_resolver.resolver import FileDiscovery, collect_files
from splitview.file_resolver.types import DiscoveryError, DiscoveryFailure, DiscoveryResult

__all__ = [
    "DEFAULT_WORKERS",
    "IGNORE_FILE_NAME",
    "DiscoveryError",
    "DiscoveryFailure",
    "DiscoveryResult",
    "EntryKind",
    "FileDiscovery",
    "FileSystem",
    "IgnorePatterns",
    "InMemoryFileSystem",
    "LocalFileSystem",
    "RuleKind",
    "SplitIgnorePattern",
    "collect_files",
    "load_split_ignore",
]
