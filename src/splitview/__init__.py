from splitview.binary import is_binary, is_binary_file
from splitview.file_resolver import FileDiscovery, IgnorePatterns, collect_files, load_split_ignore
from splitview.layout import GridCell, GridLayout, grid_for
from splitview.split_view import (
    InvalidLimitError,
    NoFilesError,
    NotEnoughFilesError,
    SplitViewConfig,
    SplitViewError,
    SplitViewPlan,
    find_text_files,
    plan_split_view,
)

__all__ = [
    "FileDiscovery",
    "GridCell",
    "GridLayout",
    "IgnorePatterns",
    "InvalidLimitError",
    "NoFilesError",
    "NotEnoughFilesError",
    "SplitViewConfig",
    "SplitViewError",
    "SplitViewPlan",
    "collect_files",
    "find_text_files",
    "grid_for",
    "is_binary",
    "is_binary_file",
    "load_split_ignore",
    "plan_split_view",
]
