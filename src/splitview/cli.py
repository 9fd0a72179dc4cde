#!/usr/bin/env python3
"""
splitview: Plan side-by-side split views of many files at once

Common usage:
  splitview src/
  splitview a.py b.py docs/
  splitview --json .
  splitview --list-files .

Directories are expanded recursively. Binary files and paths matched by the
workspace `.splitignore` file are skipped.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from splitview.config import find_config_file, load_config, merge_cli_with_config
from splitview.file_resolver import DEFAULT_WORKERS, IGNORE_FILE_NAME
from splitview.split_view import (
    DEFAULT_MAX_FILES,
    DEFAULT_MIN_FILES,
    SplitViewConfig,
    SplitViewError,
    SplitViewPlan,
    find_text_files,
    plan_split_view,
)


@dataclass
class Options:
    """Command-line options for the splitview tool."""

    files: list[str]
    workspace: str | None
    max_files: int
    min_files: int
    ignore_file: str
    extend_ignore: list[str]
    workers: int
    list_files: bool
    json: bool
    verbose: bool
    version: bool


# argparse dest names that can also come from a config file.
_TRACKED_FLAGS = ["max_files", "min_files", "ignore_file", "extend_ignore", "workers"]


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)`, where `explicit_flags` names the
    options the user actually passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="splitview",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Files or directories to open (use '.' for the current directory)",
    )
    parser.add_argument(
        "--workspace",
        type=str,
        default=None,
        metavar="DIR",
        help="Workspace root holding the ignore file (default: current directory)",
    )
    # Tracked options default to None so explicit use can be detected.
    parser.add_argument(
        "--max-files",
        type=int,
        default=None,
        dest="max_files",
        metavar="N",
        help=f"Open at most N files, 0 for no limit (default: {DEFAULT_MAX_FILES})",
    )
    parser.add_argument(
        "--min-files",
        type=int,
        default=None,
        dest="min_files",
        metavar="N",
        help=f"Require at least N text files (default: {DEFAULT_MIN_FILES})",
    )
    parser.add_argument(
        "--ignore-file",
        type=str,
        default=None,
        dest="ignore_file",
        metavar="NAME",
        help=f"Ignore file name in the workspace root (default: {IGNORE_FILE_NAME})",
    )
    parser.add_argument(
        "--extend-ignore",
        action="append",
        default=None,
        dest="extend_ignore",
        metavar="PATTERN",
        help="Additional ignore rule (e.g., 'build/' or '*.log'). Can be repeated",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        metavar="N",
        help=f"Threads for reading directories, 1 to disable (default: {DEFAULT_WORKERS})",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the discovered text files, one per line, without planning a layout",
    )
    parser.add_argument("--json", action="store_true", help="Print the plan as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)
    for flag, value in [("--max-files", opts.max_files), ("--min-files", opts.min_files)]:
        if value is not None and value < 0:
            parser.error(f"{flag} must be 0 or greater")

    explicit_flags = {name for name in _TRACKED_FLAGS if getattr(opts, name) is not None}

    return (
        Options(
            files=opts.files,
            workspace=opts.workspace,
            max_files=opts.max_files if opts.max_files is not None else DEFAULT_MAX_FILES,
            min_files=opts.min_files if opts.min_files is not None else DEFAULT_MIN_FILES,
            ignore_file=opts.ignore_file or IGNORE_FILE_NAME,
            extend_ignore=opts.extend_ignore or [],
            workers=opts.workers if opts.workers is not None else DEFAULT_WORKERS,
            list_files=opts.list_files,
            json=opts.json,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _print_plan(plan: SplitViewPlan) -> None:
    layout = plan.layout
    print(f"{layout.rows} x {layout.columns} grid, {len(plan.files)} file(s)")
    for path, cell in zip(plan.files, plan.cells):
        print(f"{cell.row + 1},{cell.column + 1}\t{path}")
    if plan.truncated:
        print(f"(showing {len(plan.files)} of {plan.total_found} files)")


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the splitview CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    options, explicit_flags = _parse_args(args)
    _configure_logging(options.verbose)

    if options.version:
        try:
            version = importlib.metadata.version("splitview")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    if not options.files:
        print(
            "Error: No input specified. Provide files or directories"
            " (use '.' for current directory). Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            merge_cli_with_config(options, load_config(config_path), explicit_flags)

        config = SplitViewConfig(
            max_files=options.max_files,
            min_files=options.min_files,
            ignore_file=options.ignore_file,
            extend_ignore=options.extend_ignore,
            workers=options.workers,
        )
        workspace = Path(options.workspace) if options.workspace else Path.cwd()

        if options.list_files:
            found = find_text_files(options.files, workspace, config)
            for f in found.files:
                print(f)
            return 0

        plan = plan_split_view(options.files, workspace, config)
    except SplitViewError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if options.json:
        print(json.dumps(plan.to_dict(), indent=2))
    else:
        _print_plan(plan)
    return 0


if __name__ == "__main__":
    sys.exit(main())
