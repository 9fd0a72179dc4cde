"""
Project settings for splitview, read from TOML.

A project keeps its settings in `.splitview.toml`, `splitview.toml` or the
`[tool.splitview]` table of `pyproject.toml`. The nearest directory holding
one of these wins. Flags given on the command line always beat file settings,
and file settings beat the planner defaults.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)


@dataclass
class SplitViewFileConfig:
    """
    Settings found in a config file. `None` means the file does not mention
    the setting, so the CLI value stays in place.
    """

    max_files: int | None = None
    min_files: int | None = None
    ignore_file: str | None = None
    extend_ignore: list[str] | None = None
    workers: int | None = None


_STANDALONE_NAMES = (".splitview.toml", "splitview.toml")
_PYPROJECT = "pyproject.toml"

_SETTING_NAMES = frozenset(f.name for f in fields(SplitViewFileConfig))


def find_config_file(start_dir: Path) -> Path | None:
    """
    Nearest config file at or above `start_dir`. A `pyproject.toml` only
    counts if it has a `[tool.splitview]` table.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        found = _config_in(directory)
        if found is not None:
            return found
    return None


def _config_in(directory: Path) -> Path | None:
    for name in _STANDALONE_NAMES:
        if (directory / name).is_file():
            return directory / name
    pyproject = directory / _PYPROJECT
    if pyproject.is_file() and _splitview_table(pyproject) is not None:
        return pyproject
    return None


def _splitview_table(pyproject: Path) -> dict[str, Any] | None:
    try:
        tool = tomllib.loads(pyproject.read_text()).get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return None
    return tool.get("splitview")


def load_config(config_path: Path) -> SplitViewFileConfig:
    """
    Read settings from `config_path`. A file that is not valid TOML is
    reported and treated as empty.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring malformed config file %s: %s", config_path, e)
        return SplitViewFileConfig()

    if config_path.name == _PYPROJECT:
        data = data.get("tool", {}).get("splitview", {})
    return _parse_config_data(data)


def _settings(data: dict[str, Any]) -> Iterator[tuple[str, Any]]:
    """Top-level keys, plus the keys of any table such as `[layout]`."""
    for key, value in data.items():
        if isinstance(value, dict):
            yield from cast(dict[str, Any], value).items()
        else:
            yield key, value


def _parse_config_data(data: dict[str, Any]) -> SplitViewFileConfig:
    known: dict[str, Any] = {}
    for key, value in _settings(data):
        name = key.replace("-", "_")
        if name in _SETTING_NAMES:
            known[name] = value
        else:
            logger.warning("Ignoring unrecognized config key: %s", key)
    return SplitViewFileConfig(**known)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: SplitViewFileConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Copy file settings onto `cli_opts`, leaving alone any option named in
    `explicit_flags`. Returns `cli_opts`.
    """
    if config is None:
        return cli_opts

    for name in sorted(_SETTING_NAMES - explicit_flags):
        value = getattr(config, name)
        if value is not None and hasattr(cli_opts, name):
            setattr(cli_opts, name, value)
    return cli_opts
