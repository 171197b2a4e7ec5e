"""Tree-sitter grammar loading and parsing."""

from __future__ import annotations

import importlib
import logging

from dataclasses import dataclass

from tree_sitter import Language, Parser, Tree

from repochunk.domain.chunking.value_objects import ASTNode
from repochunk.infrastructure.constants import (
    LANGUAGE_TO_ENTRY_POINT,
    LANGUAGE_TO_PACKAGE,
    SupportedLanguage,
)
from repochunk.infrastructure.parsing.languages import language_for_path
from repochunk.infrastructure.parsing.node_collector import collect_nodes_with_symbols
from repochunk.shared.exceptions import ParsingError
from repochunk.shared.types import FilePath

logger = logging.getLogger(__name__)

# =============================================================================
# LANGUAGE LOADING
# =============================================================================

_language_cache: dict[SupportedLanguage, Language] = {}


def _load_language(lang: SupportedLanguage) -> Language:
    """Load a tree-sitter Language from its package."""
    if lang in _language_cache:
        return _language_cache[lang]

    package_name = LANGUAGE_TO_PACKAGE.get(lang)
    if package_name is None:
        msg = f"no tree-sitter package for language: {lang}"
        raise ValueError(msg)

    module = importlib.import_module(package_name)
    entry_point = getattr(module, LANGUAGE_TO_ENTRY_POINT.get(lang, "language"))
    ts_lang = Language(entry_point())

    _language_cache[lang] = ts_lang
    return ts_lang


# =============================================================================
# PARSING
# =============================================================================


def parse_source(
    source: str,
    lang: SupportedLanguage,
    path: FilePath,
    *,
    tolerate_syntax_errors: bool = False,
) -> Tree:
    """Parse *source* with the grammar for *lang*.

    A fresh ``Parser`` is built per call, so concurrent callers never share
    parser state.

    Args:
        source: Complete file content.
        lang: Grammar to parse with.
        path: File path, used for error reporting.
        tolerate_syntax_errors: Return trees containing error nodes instead
            of rejecting them.

    Returns:
        The parse tree.

    Raises:
        ParsingError: If the grammar cannot be loaded, the parser fails, or
            the tree contains syntax errors and they are not tolerated.
    """
    try:
        ts_lang = _load_language(lang)
    except (ValueError, ImportError, AttributeError) as e:
        raise ParsingError(f"failed to load grammar: {e}", path) from e

    try:
        tree = Parser(ts_lang).parse(source.encode("utf-8", errors="replace"))
    except Exception as e:
        raise ParsingError(f"parse failed: {e}", path) from e

    if tree.root_node.has_error:
        if not tolerate_syntax_errors:
            raise ParsingError("source contains syntax errors", path)
        logger.debug("Keeping partial parse of %s", path)

    return tree


# =============================================================================
# PARSER
# =============================================================================


@dataclass
class TreeSitterParser:
    """Parses source files into node snapshots using tree-sitter."""

    tolerate_syntax_errors: bool = False

    def language_for(self, path: FilePath) -> str | None:
        config = language_for_path(path)
        return config.display_name if config is not None else None

    def extract_nodes(self, path: FilePath, content: str) -> list[ASTNode]:
        """Parse *content* and collect the nodes its language wants chunked.

        Raises:
            ParsingError: If the language is unsupported or parsing fails.
        """
        config = language_for_path(path)
        if config is None:
            raise ParsingError("unsupported language", path)

        tree = parse_source(
            content,
            config.language_id,
            path,
            tolerate_syntax_errors=self.tolerate_syntax_errors,
        )
        return collect_nodes_with_symbols(tree.root_node, config.wanted_node_kinds)
