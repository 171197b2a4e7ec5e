"""TOML-based configuration loader.

Reads ``[tool.repochunk]`` from ``pyproject.toml`` and produces a typed
``ChunkConfig`` dataclass.  Missing file or missing section → all defaults
apply (supports non-Python repos).
"""

from __future__ import annotations

import logging
import tomllib

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

from repochunk.infrastructure.parsing.languages import supported_extensions
from repochunk.shared.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_CONTINUE_ON_ERROR,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
)
from repochunk.shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# ── defaults ────────────────────────────────────────────────────────────
_DEFAULTS: dict[str, Any] = {
    "max_tokens": DEFAULT_MAX_TOKENS,
    "model": DEFAULT_MODEL,
    "concurrency": DEFAULT_CONCURRENCY,
    "continue_on_error": DEFAULT_CONTINUE_ON_ERROR,
    "extensions": [],
    "exclude_patterns": [],
    "tolerate_syntax_errors": False,
}

_ALL_KNOWN_KEYS = set(_DEFAULTS)


@dataclass(frozen=True)
class ChunkConfig:
    """Typed configuration produced by the TOML loader.

    An empty ``extensions`` list means every extension with a grammar.
    """

    max_tokens: int = DEFAULT_MAX_TOKENS
    model: str = DEFAULT_MODEL
    concurrency: int = DEFAULT_CONCURRENCY
    continue_on_error: bool = DEFAULT_CONTINUE_ON_ERROR
    extensions: list[str] = field(default_factory=list[str])
    exclude_patterns: list[str] = field(default_factory=list[str])
    tolerate_syntax_errors: bool = False


def load_chunk_config(project_root: Path | None = None) -> ChunkConfig:
    """Load repochunk configuration from ``pyproject.toml``.

    Args:
        project_root: Directory containing ``pyproject.toml``.
            Defaults to ``Path.cwd()``.

    Returns:
        A frozen ``ChunkConfig`` dataclass.

    Raises:
        ConfigurationError: On TOML parse errors or invalid values.
    """
    if project_root is None:
        project_root = Path.cwd()

    merged: dict[str, Any] = dict(_DEFAULTS)

    tool_section = _read_tool_section(project_root / "pyproject.toml")
    if tool_section is not None:
        _warn_unknown_keys(tool_section)
        for key, value in tool_section.items():
            if key in _ALL_KNOWN_KEYS:
                merged[key] = value

    merged["extensions"] = _normalize_extensions(merged["extensions"])
    merged["exclude_patterns"] = _string_list("exclude_patterns", merged["exclude_patterns"])
    _validate_ranges(merged)

    return ChunkConfig(
        max_tokens=int(merged["max_tokens"]),
        model=str(merged["model"]),
        concurrency=int(merged["concurrency"]),
        continue_on_error=bool(merged["continue_on_error"]),
        extensions=list(merged["extensions"]),
        exclude_patterns=list(merged["exclude_patterns"]),
        tolerate_syntax_errors=bool(merged["tolerate_syntax_errors"]),
    )


# ── internal helpers ────────────────────────────────────────────────────


def _read_tool_section(toml_path: Path) -> dict[str, Any] | None:
    """Read ``[tool.repochunk]`` from *toml_path*, or ``None`` if absent."""
    if not toml_path.is_file():
        return None
    try:
        with toml_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Failed to parse {toml_path}: {exc}"
        raise ConfigurationError(msg) from exc
    tool: dict[str, Any] | None = data.get("tool")
    if not isinstance(tool, dict):
        return None
    section: dict[str, Any] | None = tool.get("repochunk")
    if not isinstance(section, dict):
        return None
    return section


def _warn_unknown_keys(section: dict[str, Any]) -> None:
    """Log a warning for any keys not in the known set."""
    for key in section:
        if key not in _ALL_KNOWN_KEYS:
            logger.warning("Unknown key in [tool.repochunk]: %r", key)


def _string_list(key: str, raw: Any) -> list[str]:
    if not isinstance(raw, list) or not all(isinstance(i, str) for i in cast(list[Any], raw)):
        msg = f"{key} must be a list of strings, got {raw!r}"
        raise ConfigurationError(msg)
    return list(cast(list[str], raw))


def _normalize_extensions(raw: Any) -> list[str]:
    """Ensure every extension starts with ``'.'`` and has a grammar."""
    known = supported_extensions()
    result: list[str] = []
    for item in _string_list("extensions", raw):
        ext = item.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        if ext not in known:
            msg = f"No grammar registered for extension {ext!r}"
            raise ConfigurationError(msg)
        result.append(ext)
    return result


def _validate_ranges(merged: dict[str, Any]) -> None:
    """Validate numeric ranges and the model name."""
    for key in ("max_tokens", "concurrency"):
        value = merged[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            msg = f"{key} must be a positive integer, got {value!r}"
            raise ConfigurationError(msg)

    if not isinstance(merged["model"], str) or not merged["model"].strip():
        msg = f"model must be a non-empty string, got {merged['model']!r}"
        raise ConfigurationError(msg)
