"""Recursive source-file discovery for a repository checkout."""

from __future__ import annotations

import fnmatch
import logging
import os

from collections.abc import Collection, Iterable
from pathlib import Path, PurePosixPath

from repochunk.infrastructure.parsing.languages import supported_extensions
from repochunk.shared.constants import DEFAULT_EXCLUDED_DIRS
from repochunk.shared.exceptions import FileSystemError
from repochunk.shared.types import FilePath

logger = logging.getLogger(__name__)

_GLOBSTAR_PREFIX = "**/"


def _matches_any(rel_path: str, patterns: Iterable[str]) -> bool:
    for pattern in patterns:
        if fnmatch.fnmatchcase(rel_path, pattern):
            return True
        # "**/x" also matches "x" at the top level.
        if pattern.startswith(_GLOBSTAR_PREFIX) and fnmatch.fnmatchcase(
            rel_path, pattern[len(_GLOBSTAR_PREFIX) :]
        ):
            return True
    return False


def _log_walk_error(error: OSError) -> None:
    logger.warning("Skipping unreadable directory %s: %s", error.filename, error.strerror)


def scan_repository(
    root: str | Path,
    extensions: Collection[str] | None = None,
    exclude_patterns: Collection[str] = (),
    *,
    excluded_dirs: Collection[str] = DEFAULT_EXCLUDED_DIRS,
) -> list[FilePath]:
    """Find every source file under *root* worth chunking.

    Args:
        root: Repository root directory.
        extensions: Wanted file extensions (``".ts"``), matched case
            insensitively. Defaults to every extension with a grammar.
        exclude_patterns: Shell globs matched against paths relative to
            *root*, in POSIX form. A directory matching a pattern is pruned.
        excluded_dirs: Directory names never descended into.

    Returns:
        Sorted, deduplicated file paths (joined onto *root*).

    Raises:
        FileSystemError: If *root* does not exist or is not a directory.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise FileSystemError(
            "repository root is missing or not a directory",
            FilePath(str(root_path)),
            recoverable=False,
        )

    wanted = {ext.lower() for ext in (extensions or supported_extensions())}
    visited_dirs: set[str] = set()
    found: set[FilePath] = set()

    for dirpath, dirnames, filenames in os.walk(
        root_path, onerror=_log_walk_error, followlinks=True
    ):
        real_dir = os.path.realpath(dirpath)
        if real_dir in visited_dirs:
            # Symlink cycle or a second link to an already scanned directory.
            dirnames[:] = []
            continue
        visited_dirs.add(real_dir)

        current = Path(dirpath)
        rel_dir = PurePosixPath(current.relative_to(root_path).as_posix())

        kept_dirs: list[str] = []
        for name in sorted(dirnames):
            if name in excluded_dirs:
                continue
            if _matches_any(str(rel_dir / name), exclude_patterns):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in filenames:
            if PurePosixPath(name).suffix.lower() not in wanted:
                continue
            rel_file = str(rel_dir / name)
            if _matches_any(rel_file, exclude_patterns):
                continue
            full_path = current / name
            if not full_path.is_file():
                logger.debug("Skipping broken link %s", full_path)
                continue
            found.add(FilePath(str(full_path)))

    logger.debug("Found %d source files under %s", len(found), root_path)
    return sorted(found)
