"""
FileDiscovery: main entry point for file discovery.

Expands files and directories into a flat, ordered list of files, pruning
ignored directories before descending into them and filtering ignored files.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from splitview.file_resolver.defaults import DEFAULT_WORKERS
from splitview.file_resolver.filesystem import EntryKind, FileSystem, LocalFileSystem
from splitview.file_resolver.patterns import IgnorePatterns
from splitview.file_resolver.types import DiscoveryError, DiscoveryFailure, DiscoveryResult

logger = logging.getLogger(__name__)

_Children = list[tuple[Path, EntryKind]]


class FileDiscovery:
    """
    Walks roots in pre-order, visiting children in listing order.

    Ignore rules apply only when both `matcher` and `base_dir` are given; paths
    are matched relative to `base_dir`. Listings of sibling directories are
    read concurrently, but the output order never depends on which read
    finishes first.
    """

    def __init__(
        self,
        matcher: IgnorePatterns | None = None,
        base_dir: str | Path | None = None,
        filesystem: FileSystem | None = None,
        max_workers: int = DEFAULT_WORKERS,
    ) -> None:
        self._matcher: IgnorePatterns | None = matcher
        self._base_dir: Path | None = Path(base_dir) if base_dir is not None else None
        self._fs: FileSystem = filesystem or LocalFileSystem()
        self._max_workers: int = max_workers

    def collect(self, root: str | Path) -> list[Path]:
        """
        Files under `root`, or `root` itself if it is a file.

        Raises `DiscoveryError` if `root` cannot be stat'd or listed. Nested
        directories that cannot be listed are logged and skipped.
        """
        root = Path(os.path.normpath(Path(root).absolute()))
        try:
            kind = self._fs.stat(root)
        except OSError as e:
            raise DiscoveryError(root, e) from e

        if kind is EntryKind.FILE:
            if self._is_ignored(root):
                logger.info("Ignoring file: %s (matched by ignore pattern)", root)
                return []
            return [root]
        if kind is not EntryKind.DIRECTORY:
            logger.debug("Skipping %s: not a file or directory", root)
            return []

        try:
            entries = self._fs.list_directory(root)
        except OSError as e:
            raise DiscoveryError(root, e) from e

        listings: dict[Path, _Children] = {root: self._filter_children(root, entries)}
        frontier = _subdirectories(listings[root])
        if frontier and self._max_workers > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
                self._read_levels(frontier, listings, executor.map)
        else:
            self._read_levels(frontier, listings, map)

        return _flatten(root, listings)

    def collect_all(self, roots: Sequence[str | Path]) -> DiscoveryResult:
        """
        Collect every root in order. Roots that fail are recorded and skipped;
        a file reached from more than one root is listed once.
        """
        result = DiscoveryResult()
        seen: set[Path] = set()
        for root in roots:
            try:
                found = self.collect(root)
            except DiscoveryError as e:
                logger.warning("Skipping %s", e)
                result.failures.append(DiscoveryFailure(path=e.path, error=e.error))
                continue
            for path in found:
                if path not in seen:
                    seen.add(path)
                    result.files.append(path)
        return result

    def _read_levels(
        self,
        frontier: list[Path],
        listings: dict[Path, _Children],
        mapper: Callable[[Callable[[Path], _Children], Iterable[Path]], Iterator[_Children]],
    ) -> None:
        """
        Read directory listings one depth level at a time. `mapper` yields
        results in the order of its input, which keeps the merge stable.
        """
        while frontier:
            next_frontier: list[Path] = []
            for directory, children in zip(frontier, mapper(self._read_children, frontier)):
                listings[directory] = children
                next_frontier.extend(_subdirectories(children))
            frontier = next_frontier

    def _read_children(self, directory: Path) -> _Children:
        try:
            entries = self._fs.list_directory(directory)
        except OSError as e:
            logger.warning("Skipping unreadable directory %s: %s", directory, e)
            return []
        return self._filter_children(directory, entries)

    def _filter_children(
        self, directory: Path, entries: list[tuple[str, EntryKind | None]]
    ) -> _Children:
        """Drop ignored children. Ignored directories are pruned here, unlisted."""
        children: _Children = []
        for name, kind in entries:
            if kind is None:
                continue
            child = directory / name
            if self._is_ignored(child):
                logger.debug("Ignoring %s %s", kind.value, child)
                continue
            children.append((child, kind))
        return children

    def _is_ignored(self, path: Path) -> bool:
        if self._matcher is None or self._base_dir is None:
            return False
        return self._matcher.ignores(_relative_path(path, self._base_dir))


def _relative_path(path: Path, base_dir: Path) -> str:
    try:
        return os.path.relpath(path, base_dir)
    except ValueError:
        # Different drives on Windows: there is no relative form.
        return str(path)


def _subdirectories(children: _Children) -> list[Path]:
    return [child for child, kind in children if kind is EntryKind.DIRECTORY]


def _flatten(root: Path, listings: dict[Path, _Children]) -> list[Path]:
    """Files in pre-order, children in listing order."""
    files: list[Path] = []
    stack = list(reversed(listings.get(root, [])))
    while stack:
        child, kind = stack.pop()
        if kind is EntryKind.FILE:
            files.append(child)
        else:
            stack.extend(reversed(listings.get(child, [])))
    return files


def collect_files(
    root: str | Path,
    matcher: IgnorePatterns | None = None,
    base_dir: str | Path | None = None,
    filesystem: FileSystem | None = None,
) -> list[Path]:
    """Convenience wrapper for a one-off `FileDiscovery(...).collect(root)`."""
    return FileDiscovery(matcher, base_dir, filesystem).collect(root)
