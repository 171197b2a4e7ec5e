"""Tests for repository file discovery."""

from __future__ import annotations

import os

from pathlib import Path

import pytest

from repochunk.infrastructure.discovery.repository_scanner import scan_repository
from repochunk.shared.exceptions import FileSystemError

# =============================================================================
# Fixtures
# =============================================================================


def _touch(root: Path, rel: str, content: str = "x") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    for rel in [
        "src/index.ts",
        "src/util/helpers.ts",
        "src/App.TSX",
        "src/types.d.ts",
        "src/index.test.ts",
        "scripts/build.py",
        "README.md",
        "node_modules/lib/index.js",
        "dist/bundle.js",
        ".git/hooks/pre-commit.py",
    ]:
        _touch(tmp_path, rel)
    return tmp_path


def _relative(paths: list[str], root: Path) -> list[str]:
    return [Path(p).relative_to(root).as_posix() for p in paths]


# =============================================================================
# Tests
# =============================================================================


def test_finds_supported_files_sorted(repo: Path) -> None:
    found = scan_repository(repo)

    assert _relative(found, repo) == [
        "scripts/build.py",
        "src/App.TSX",
        "src/index.test.ts",
        "src/index.ts",
        "src/types.d.ts",
        "src/util/helpers.ts",
    ]


def test_filters_by_extension_case_insensitively(repo: Path) -> None:
    found = scan_repository(repo, extensions=[".TSX"])
    assert _relative(found, repo) == ["src/App.TSX"]


def test_exclude_patterns(repo: Path) -> None:
    found = scan_repository(
        repo,
        extensions=[".ts"],
        exclude_patterns=["**/*.d.ts", "**/*.test.ts"],
    )
    assert _relative(found, repo) == ["src/index.ts", "src/util/helpers.ts"]


def test_globstar_prefix_matches_top_level(tmp_path: Path) -> None:
    _touch(tmp_path, "gen.ts")
    _touch(tmp_path, "src/gen.ts")
    assert scan_repository(tmp_path, exclude_patterns=["**/gen.ts"]) == []


def test_excluded_directory_pattern_prunes_subtree(repo: Path) -> None:
    found = scan_repository(repo, exclude_patterns=["src/util"])
    assert "src/util/helpers.ts" not in _relative(found, repo)


def test_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileSystemError, match="not a directory"):
        scan_repository(tmp_path / "missing")


def test_file_root_raises(tmp_path: Path) -> None:
    file_path = _touch(tmp_path, "a.ts")
    with pytest.raises(FileSystemError):
        scan_repository(file_path)


def test_symlink_cycle_is_visited_once(tmp_path: Path) -> None:
    _touch(tmp_path, "pkg/mod.py")
    try:
        os.symlink(tmp_path / "pkg", tmp_path / "pkg" / "loop", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks unsupported")

    found = scan_repository(tmp_path)

    assert _relative(found, tmp_path) == ["pkg/mod.py"]


def test_broken_symlink_is_skipped(tmp_path: Path) -> None:
    _touch(tmp_path, "ok.ts")
    try:
        os.symlink(tmp_path / "nowhere.ts", tmp_path / "dangling.ts")
    except (OSError, NotImplementedError):
        pytest.skip("symlinks unsupported")

    assert _relative(scan_repository(tmp_path), tmp_path) == ["ok.ts"]
