"""
Planning a split view: which files to open and where each one goes.

The pipeline mirrors the editor command: load the workspace ignore file,
expand the selection, drop binary files, enforce the file count limits, and
lay the survivors out on a near-square grid.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from splitview.binary import is_binary_file
from splitview.file_resolver import (
    DEFAULT_WORKERS,
    IGNORE_FILE_NAME,
    DiscoveryFailure,
    FileDiscovery,
    FileSystem,
    LocalFileSystem,
    load_split_ignore,
)
from splitview.layout import GridCell, GridLayout, grid_for

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 32
DEFAULT_MIN_FILES = 2


class SplitViewError(ValueError):
    """A selection that cannot be shown as a split view."""


class NoFilesError(SplitViewError):
    pass


class NotEnoughFilesError(SplitViewError):
    pass


class InvalidLimitError(SplitViewError):
    pass


@dataclass
class SplitViewConfig:
    """Settings for planning. `max_files=0` disables the limit."""

    max_files: int = DEFAULT_MAX_FILES
    min_files: int = DEFAULT_MIN_FILES
    ignore_file: str = IGNORE_FILE_NAME
    extend_ignore: list[str] = field(default_factory=list)
    workers: int = DEFAULT_WORKERS


@dataclass
class TextFiles:
    """Discovered text files, with what was skipped on the way."""

    files: list[Path] = field(default_factory=list)
    skipped_binary: list[Path] = field(default_factory=list)
    failures: list[DiscoveryFailure] = field(default_factory=list)


@dataclass
class SplitViewPlan:
    files: list[Path]
    layout: GridLayout
    total_found: int
    truncated: bool = False
    skipped_binary: list[Path] = field(default_factory=list)
    failures: list[DiscoveryFailure] = field(default_factory=list)

    @property
    def cells(self) -> list[GridCell]:
        return self.layout.cells(len(self.files))

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": self.layout.rows,
            "columns": self.layout.columns,
            "editor_layout": self.layout.to_editor_layout(),
            "panes": [
                {"path": str(path), "row": cell.row, "column": cell.column, "group": cell.group}
                for path, cell in zip(self.files, self.cells)
            ],
            "total_found": self.total_found,
            "truncated": self.truncated,
            "skipped_binary": [str(p) for p in self.skipped_binary],
            "failures": [failure.message for failure in self.failures],
        }


def find_text_files(
    paths: Sequence[str | Path],
    workspace_root: str | Path | None = None,
    config: SplitViewConfig | None = None,
    filesystem: FileSystem | None = None,
) -> TextFiles:
    """
    Expand `paths` into text files. Ignore rules come from the ignore file in
    `workspace_root`; without a workspace root nothing is ignored.
    """
    config = config or SplitViewConfig()
    fs = filesystem or LocalFileSystem()

    matcher = None
    if workspace_root is not None:
        matcher = load_split_ignore(
            workspace_root, config.ignore_file, config.extend_ignore, filesystem=fs
        )

    discovery = FileDiscovery(matcher, workspace_root, filesystem=fs, max_workers=config.workers)
    found = discovery.collect_all(paths)

    text_files = TextFiles(failures=found.failures)
    for path in found.files:
        if is_binary_file(path, fs):
            logger.debug("Skipping binary file %s", path)
            text_files.skipped_binary.append(path)
        else:
            text_files.files.append(path)
    return text_files


def plan_split_view(
    paths: Sequence[str | Path],
    workspace_root: str | Path | None = None,
    config: SplitViewConfig | None = None,
    filesystem: FileSystem | None = None,
) -> SplitViewPlan:
    """
    Plan a split view for the selected `paths`.

    Raises `InvalidLimitError` for negative limits, `NoFilesError` when
    nothing usable is selected and `NotEnoughFilesError` below
    `config.min_files`. More than `config.max_files` files are cut down to
    the first `max_files`.
    """
    config = config or SplitViewConfig()
    if config.max_files < 0 or config.min_files < 0:
        raise InvalidLimitError(
            f"File limits must be 0 or greater (max_files={config.max_files},"
            f" min_files={config.min_files})"
        )
    if not paths:
        raise NoFilesError("No file selected")

    found = find_text_files(paths, workspace_root, config, filesystem)
    if not found.files and not found.skipped_binary:
        raise NoFilesError("No files found to open")
    if not found.files:
        raise NoFilesError("No text files found to open")
    if len(found.files) < config.min_files:
        raise NotEnoughFilesError(
            f"Need at least {config.min_files} text files to open in split view."
        )

    files = found.files
    truncated = False
    if config.max_files and len(files) > config.max_files:
        logger.warning(
            "Limiting to %d files (%d found). Use %s to filter unwanted files.",
            config.max_files,
            len(files),
            config.ignore_file,
        )
        files = files[: config.max_files]
        truncated = True

    return SplitViewPlan(
        files=files,
        layout=grid_for(len(files)),
        total_found=len(found.files),
        truncated=truncated,
        skipped_binary=found.skipped_binary,
        failures=found.failures,
    )
