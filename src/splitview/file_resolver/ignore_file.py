"""Loading `.splitignore` files from a workspace root."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from splitview.file_resolver.defaults import IGNORE_FILE_NAME
from splitview.file_resolver.filesystem import FileSystem, LocalFileSystem
from splitview.file_resolver.patterns import IgnorePatterns

logger = logging.getLogger(__name__)


def _read_ignore_file(path: Path, filesystem: FileSystem | None = None) -> list[str] | None:
    """
    Raw lines of an ignore file, or `None` if it is missing, unreadable,
    or not valid UTF-8.
    """
    fs = filesystem or LocalFileSystem()
    try:
        data = fs.read_file(path)
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.error("Error loading %s file: %s", path.name, e)
        return None
    try:
        return data.decode("utf-8-sig").split("\n")
    except UnicodeDecodeError as e:
        logger.error("Error loading %s file: %s", path.name, e)
        return None


def load_split_ignore(
    workspace_root: str | Path,
    ignore_file: str = IGNORE_FILE_NAME,
    extra_patterns: Sequence[str] | None = None,
    filesystem: FileSystem | None = None,
) -> IgnorePatterns | None:
    """
    Read the ignore file in `workspace_root` and return its rules, with any
    `extra_patterns` appended. Returns `None` when there is no usable ignore
    file and no extra patterns, which disables filtering entirely.
    """
    path = Path(workspace_root) / ignore_file
    lines = _read_ignore_file(path, filesystem)
    if lines is None and not extra_patterns:
        return None
    if lines is not None:
        logger.info("Found %s file, applying ignore patterns", ignore_file)
    return IgnorePatterns([*(lines or []), *(extra_patterns or [])])
