"""Tests for the file_resolver module."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from splitview.file_resolver import (
    DiscoveryError,
    FileDiscovery,
    IgnorePatterns,
    InMemoryFileSystem,
    collect_files,
    load_split_ignore,
)
from splitview.file_resolver.ignore_file import (
    _read_ignore_file,  # pyright: ignore[reportPrivateUsage]
)


def _names(paths: list[Path], root: Path) -> list[str]:
    return [p.relative_to(root).as_posix() for p in paths]


def test_single_file(tmp_path: Path):
    readme = tmp_path / "README.md"
    readme.write_text("# Hello")

    assert collect_files(readme) == [readme]


def test_directory_recursion_in_preorder(tmp_path: Path):
    (tmp_path / "b.txt").write_text("b")
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "guide.md").write_text("# Guide")
    (docs / "api.md").write_text("# API")
    (tmp_path / "a.txt").write_text("a")

    result = collect_files(tmp_path)
    assert _names(result, tmp_path) == ["a.txt", "b.txt", "docs/api.md", "docs/guide.md"]


def test_ignored_directory_end_to_end(tmp_path: Path):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    temp = tmp_path / "temp"
    temp.mkdir()
    (temp / "c.txt").write_text("c")

    result = collect_files(tmp_path, IgnorePatterns(["temp/"]), tmp_path)
    assert _names(result, tmp_path) == ["a.txt", "b.txt"]


def test_wildcard_and_directory_rules_end_to_end(tmp_path: Path):
    (tmp_path / "app.log").write_text("log")
    build = tmp_path / "build"
    build.mkdir()
    (build / "out.js").write_text("out")
    src = tmp_path / "src"
    src.mkdir()
    (src / "main.js").write_text("main")

    result = collect_files(tmp_path, IgnorePatterns(["*.log", "build/"]), tmp_path)
    assert _names(result, tmp_path) == ["src/main.js"]


def test_no_filtering_without_base_dir(tmp_path: Path):
    (tmp_path / "app.log").write_text("log")

    result = collect_files(tmp_path, IgnorePatterns(["*.log"]), None)
    assert _names(result, tmp_path) == ["app.log"]


def test_explicit_file_is_filtered(tmp_path: Path):
    log = tmp_path / "app.log"
    log.write_text("log")

    assert collect_files(log, IgnorePatterns(["*.log"]), tmp_path) == []


def test_rules_are_relative_to_base_dir(tmp_path: Path):
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "keep.txt").write_text("keep")
    (sub / "skip.txt").write_text("skip")

    # Walking `sub` still matches rules against paths relative to `tmp_path`.
    result = collect_files(sub, IgnorePatterns(["sub/skip.txt", "skip.txt"]), tmp_path)
    assert _names(result, tmp_path) == ["sub/keep.txt"]


def test_missing_root_raises(tmp_path: Path):
    missing = tmp_path / "nope"
    with pytest.raises(DiscoveryError) as exc:
        collect_files(missing)
    assert exc.value.path == missing
    assert isinstance(exc.value.error, FileNotFoundError)


def test_output_paths_are_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    (tmp_path / "a.txt").write_text("a")
    monkeypatch.chdir(tmp_path)

    result = collect_files(".")
    assert result == [tmp_path / "a.txt"]
    assert all(p.is_absolute() for p in result)


def test_dot_segments_are_normalized(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "src").mkdir()
    monkeypatch.chdir(tmp_path)

    result = FileDiscovery().collect_all([".", "src/..", "src/../a.txt"])
    assert result.files == [tmp_path / "a.txt"]
    assert not any(".." in p.parts for p in result.files)


def test_symlinks_inside_directories_are_not_followed(tmp_path: Path):
    real = tmp_path / "real"
    real.mkdir()
    (real / "file.txt").write_text("x")
    (tmp_path / "link").symlink_to(real, target_is_directory=True)

    result = collect_files(tmp_path)
    assert _names(result, tmp_path) == ["real/file.txt"]


def test_unreadable_subdirectory_is_skipped(tmp_path: Path):
    if os.getuid() == 0:
        pytest.skip("root can list any directory")
    (tmp_path / "a.txt").write_text("a")
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "secret.txt").write_text("s")
    locked.chmod(0)
    try:
        result = collect_files(tmp_path)
    finally:
        locked.chmod(stat.S_IRWXU)
    assert _names(result, tmp_path) == ["a.txt"]


def test_idempotent(tmp_path: Path):
    for name in ["c.txt", "a.txt", "b.txt"]:
        (tmp_path / name).write_text(name)
    nested = tmp_path / "x" / "y"
    nested.mkdir(parents=True)
    (nested / "z.txt").write_text("z")

    discovery = FileDiscovery(IgnorePatterns(["b.txt"]), tmp_path)
    assert discovery.collect(tmp_path) == discovery.collect(tmp_path)


# In-memory filesystem


def _memory_tree() -> InMemoryFileSystem:
    fs = InMemoryFileSystem()
    fs.add_file("/ws/README.md", "# readme")
    fs.add_file("/ws/src/main.js", "main")
    fs.add_file("/ws/src/util/helpers.js", "helpers")
    fs.add_file("/ws/node_modules/pkg/index.js", "index")
    fs.add_file("/ws/node_modules/pkg/deep/er/file.js", "deep")
    fs.add_file("/ws/app.log", "log")
    return fs


def test_memory_listing_order_is_preserved():
    fs = InMemoryFileSystem()
    fs.add_file("/ws/zeta.txt")
    fs.add_file("/ws/alpha/one.txt")
    fs.add_file("/ws/mid.txt")
    fs.add_file("/ws/alpha/two.txt")

    result = FileDiscovery(filesystem=fs).collect("/ws")
    assert [str(p) for p in result] == [
        "/ws/zeta.txt",
        "/ws/alpha/one.txt",
        "/ws/alpha/two.txt",
        "/ws/mid.txt",
    ]


@pytest.mark.parametrize("workers", [1, 2, 8])
def test_concurrency_does_not_reorder(workers: int):
    fs = InMemoryFileSystem()
    for i in range(5):
        for j in range(4):
            fs.add_file(f"/ws/d{i}/e{j}/f.txt")
        fs.add_file(f"/ws/top{i}.txt")

    result = FileDiscovery(filesystem=fs, max_workers=workers).collect("/ws")
    expected = [
        f"/ws/{part}"
        for i in range(5)
        for part in [*(f"d{i}/e{j}/f.txt" for j in range(4)), f"top{i}.txt"]
    ]
    assert [str(p) for p in result] == expected


@pytest.mark.parametrize("workers", [1, 4])
def test_very_deep_tree(workers: int):
    deep_file = "/ws/" + "d/" * 1200 + "f.txt"
    fs = InMemoryFileSystem()
    fs.add_file(deep_file)
    fs.add_file("/ws/z.txt")

    result = FileDiscovery(filesystem=fs, max_workers=workers).collect("/ws")
    assert [str(p) for p in result] == [deep_file, "/ws/z.txt"]


def test_pruned_directory_is_never_listed():
    fs = _memory_tree()
    fs.make_unreadable("/ws/node_modules/pkg/deep")

    discovery = FileDiscovery(IgnorePatterns(["node_modules/"]), "/ws", filesystem=fs)
    result = discovery.collect("/ws")

    assert [str(p) for p in result] == [
        "/ws/README.md",
        "/ws/src/main.js",
        "/ws/src/util/helpers.js",
        "/ws/app.log",
    ]
    assert not any("node_modules" in str(p) for p in fs.listed)


def test_memory_unreadable_subtree_is_skipped():
    fs = _memory_tree()
    fs.make_unreadable("/ws/src/util")

    result = FileDiscovery(filesystem=fs).collect("/ws/src")
    assert [str(p) for p in result] == ["/ws/src/main.js"]


def test_unreadable_root_raises():
    fs = _memory_tree()
    fs.make_unreadable("/ws/src")

    with pytest.raises(DiscoveryError):
        FileDiscovery(filesystem=fs).collect("/ws/src")


def test_collect_all_skips_failures_and_deduplicates():
    fs = _memory_tree()
    discovery = FileDiscovery(IgnorePatterns(["node_modules/", "*.log"]), "/ws", filesystem=fs)

    result = discovery.collect_all(["/ws/src/main.js", "/ws/missing", "/ws/src", "/ws/README.md"])

    assert [str(p) for p in result.files] == [
        "/ws/src/main.js",
        "/ws/src/util/helpers.js",
        "/ws/README.md",
    ]
    assert [str(f.path) for f in result.failures] == ["/ws/missing"]
    assert "/ws/missing" in result.failures[0].message


def test_selected_ignored_directory_yields_nothing():
    fs = _memory_tree()
    discovery = FileDiscovery(IgnorePatterns(["node_modules/"]), "/ws", filesystem=fs)

    assert discovery.collect("/ws/node_modules") == []


# Ignore file loading


def test_load_split_ignore(tmp_path: Path):
    (tmp_path / ".splitignore").write_text("# generated\nbuild/\n*.log\n")

    matcher = load_split_ignore(tmp_path)
    assert matcher is not None
    assert matcher.patterns == ["build/", "*.log"]


def test_load_split_ignore_missing(tmp_path: Path):
    assert load_split_ignore(tmp_path) is None


def test_load_split_ignore_extra_patterns_only(tmp_path: Path):
    matcher = load_split_ignore(tmp_path, extra_patterns=["dist/"])
    assert matcher is not None
    assert matcher.patterns == ["dist/"]


def test_load_split_ignore_custom_name(tmp_path: Path):
    (tmp_path / ".viewignore").write_text("docs/\n")

    matcher = load_split_ignore(tmp_path, ignore_file=".viewignore", extra_patterns=["*.tmp"])
    assert matcher is not None
    assert matcher.patterns == ["docs/", "*.tmp"]


def test_load_split_ignore_in_memory():
    fs = InMemoryFileSystem({"/ws/.splitignore": "temp/\n"})

    matcher = load_split_ignore("/ws", filesystem=fs)
    assert matcher is not None
    assert matcher.ignores("temp/c.txt")


def test_read_ignore_file_missing(tmp_path: Path):
    assert _read_ignore_file(tmp_path / "nonexistent") is None


def test_read_ignore_file_unreadable():
    fs = InMemoryFileSystem({"/ws/.splitignore": "*.log\n"})
    fs.make_unreadable("/ws/.splitignore")

    assert _read_ignore_file(Path("/ws/.splitignore"), fs) is None


def test_read_ignore_file_non_utf8(tmp_path: Path):
    ignore_file = tmp_path / ".splitignore"
    ignore_file.write_bytes(b"\x80\x81\x82\xff\xfe")
    assert _read_ignore_file(ignore_file) is None


def test_read_ignore_file_strips_utf8_bom(tmp_path: Path):
    (tmp_path / ".splitignore").write_bytes(b"\xef\xbb\xbfbuild/\n*.log\n")

    matcher = load_split_ignore(tmp_path)
    assert matcher is not None
    assert matcher.patterns == ["build/", "*.log"]
    assert matcher.ignores("build/out.js")
