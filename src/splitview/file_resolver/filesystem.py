"""
Filesystem access for discovery, behind a small protocol so the walker can
run against the local disk or an in-memory tree.
"""

from __future__ import annotations

import errno
import os
import stat
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Protocol


class EntryKind(Enum):
    """Kind of a filesystem entry. Anything else is reported as `None`."""

    FILE = "file"
    DIRECTORY = "directory"


class FileSystem(Protocol):
    def stat(self, path: Path) -> EntryKind | None:
        """Kind of `path`, following symlinks. Raises `OSError` if missing."""
        ...

    def list_directory(self, path: Path) -> list[tuple[str, EntryKind | None]]:
        """Names and kinds of the direct children of `path`, in listing order."""
        ...

    def read_file(self, path: Path, limit: int | None = None) -> bytes:
        """Contents of `path`, or only the first `limit` bytes."""
        ...


class LocalFileSystem:
    """
    The real filesystem. Directory listings are sorted by name so traversal
    order is stable across platforms. Symlinks inside a directory are not
    followed (they are listed with kind `None`).
    """

    def stat(self, path: Path) -> EntryKind | None:
        mode = os.stat(path).st_mode
        if stat.S_ISREG(mode):
            return EntryKind.FILE
        if stat.S_ISDIR(mode):
            return EntryKind.DIRECTORY
        return None

    def list_directory(self, path: Path) -> list[tuple[str, EntryKind | None]]:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda entry: entry.name)
        return [(entry.name, _entry_kind(entry)) for entry in entries]

    def read_file(self, path: Path, limit: int | None = None) -> bytes:
        with open(path, "rb") as f:
            return f.read() if limit is None else f.read(limit)


def _entry_kind(entry: os.DirEntry[str]) -> EntryKind | None:
    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return EntryKind.FILE
    return None


class InMemoryFileSystem:
    """
    A POSIX-style tree held in memory. Children are listed in insertion order.
    Paths marked unreadable raise `PermissionError` on listing and reading.

    `listed` records every directory passed to `list_directory`, which lets
    tests check that pruned subtrees are never visited.
    """

    def __init__(self, files: dict[str, bytes | str] | None = None) -> None:
        self._files: dict[PurePosixPath, bytes] = {}
        self._children: dict[PurePosixPath, dict[str, None]] = {PurePosixPath("/"): {}}
        self._unreadable: set[PurePosixPath] = set()
        self.listed: list[PurePosixPath] = []
        for path, content in (files or {}).items():
            self.add_file(path, content)

    def add_file(self, path: str | Path, content: bytes | str = b"") -> None:
        p = PurePosixPath(path)
        self._add_parents(p)
        self._files[p] = content.encode("utf-8") if isinstance(content, str) else content

    def add_directory(self, path: str | Path) -> None:
        p = PurePosixPath(path)
        self._add_parents(p)
        self._children.setdefault(p, {})

    def make_unreadable(self, path: str | Path) -> None:
        self._unreadable.add(PurePosixPath(path))

    def _add_parents(self, p: PurePosixPath) -> None:
        child = p
        for parent in p.parents:
            self._children.setdefault(parent, {})[child.name] = None
            child = parent

    def stat(self, path: Path) -> EntryKind | None:
        p = PurePosixPath(path)
        if p in self._files:
            return EntryKind.FILE
        if p in self._children:
            return EntryKind.DIRECTORY
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))

    def list_directory(self, path: Path) -> list[tuple[str, EntryKind | None]]:
        p = PurePosixPath(path)
        self.listed.append(p)
        if p not in self._children:
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(path))
        if p in self._unreadable:
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), str(path))
        return [
            (name, EntryKind.FILE if p / name in self._files else EntryKind.DIRECTORY)
            for name in self._children[p]
        ]

    def read_file(self, path: Path, limit: int | None = None) -> bytes:
        p = PurePosixPath(path)
        if p in self._unreadable:
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), str(path))
        if p not in self._files:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        data = self._files[p]
        return data if limit is None else data[:limit]
