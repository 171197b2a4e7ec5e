"""Per-extension language configuration table."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

from repochunk.infrastructure.constants import (
    EXTENSION_TO_LANGUAGE,
    LANGUAGE_DISPLAY_NAMES,
    WANTED_NODES,
    FileExtension,
    SupportedLanguage,
)


@dataclass(frozen=True)
class LanguageConfig:
    """How files of one extension are parsed and which nodes are chunked."""

    language_id: SupportedLanguage
    display_name: str
    wanted_node_kinds: frozenset[str]


def _build_table() -> dict[str, LanguageConfig]:
    table: dict[str, LanguageConfig] = {}
    for ext, lang in EXTENSION_TO_LANGUAGE.items():
        table[ext.value] = LanguageConfig(
            language_id=lang,
            display_name=LANGUAGE_DISPLAY_NAMES.get(lang, lang.value),
            wanted_node_kinds=WANTED_NODES[lang],
        )
    return table


LANGUAGE_CONFIGS: dict[str, LanguageConfig] = _build_table()


def supported_extensions() -> frozenset[str]:
    """Every extension with a registered grammar."""
    return frozenset(ext.value for ext in FileExtension)


def language_for_path(path: str | PurePath) -> LanguageConfig | None:
    """Look up the configuration for a file, or ``None`` if unsupported."""
    return LANGUAGE_CONFIGS.get(PurePath(path).suffix.lower())
