"""Best-effort import/export extraction from raw chunk text.

Pattern based, not parser based: results feed retrieval metadata only and
never affect coverage or budgets.
"""

from __future__ import annotations

import re

from dataclasses import dataclass

# =============================================================================
# PATTERNS
# =============================================================================

_ES_MODULE_SOURCE = re.compile(
    r"import\s+(?:(?:\{[^}]*\}|\*\s+as\s+\w+|\w+)"
    r"(?:\s*,\s*(?:\{[^}]*\}|\*\s+as\s+\w+|\w+))*\s+from\s+)?['\"`]([^'\"`]+)['\"`]"
)
_ES_NAMED_IMPORTS = re.compile(r"import\s+\{([^}]+)\}")
_ES_DEFAULT_IMPORT = re.compile(r"import\s+(\w+)\s+from")
_ES_DECLARED_EXPORT = re.compile(
    r"export\s+(?:default\s+)?(?:(?:class|function|interface|type|const|let|var|enum)\s+)?(\w+)"
)
_ES_NAMED_EXPORTS = re.compile(r"export\s+\{([^}]+)\}")

_PY_IMPORT = re.compile(r"^\s*import\s+([\w.]+(?:\s*,\s*[\w.]+)*)", re.MULTILINE)
_PY_FROM_IMPORT = re.compile(r"^\s*from\s+([\w.]+)\s+import\s", re.MULTILINE)
_PY_PUBLIC_DEFINITION = re.compile(
    r"^(?:async\s+def|def|class)\s+([A-Za-z]\w*)", re.MULTILINE
)

_GO_SINGLE_IMPORT = re.compile(r"^\s*import\s+(?:[\w.]+\s+)?\"([^\"]+)\"", re.MULTILINE)
_GO_IMPORT_BLOCK = re.compile(r"^\s*import\s*\(([^)]*)\)", re.MULTILINE)
_GO_QUOTED = re.compile(r"\"([^\"]+)\"")
_GO_EXPORTED = re.compile(
    r"^(?:func\s+(?:\([^)]*\)\s*)?|type\s+|var\s+|const\s+)([A-Z]\w*)", re.MULTILINE
)

_RUST_USE = re.compile(r"^\s*(?:pub\s+)?use\s+([\w:]+)", re.MULTILINE)
_RUST_PUBLIC_ITEM = re.compile(
    r"^\s*pub(?:\([^)]*\))?\s+(?:async\s+)?(?:fn|struct|enum|trait|mod|type|const|static)\s+(\w+)",
    re.MULTILINE,
)

_JAVA_IMPORT = re.compile(r"^\s*import\s+(?:static\s+)?([\w.*]+)\s*;", re.MULTILINE)
_JAVA_PUBLIC_TYPE = re.compile(
    r"public\s+(?:(?:abstract|final|static|sealed)\s+)*(?:class|interface|enum|record)\s+(\w+)"
)


# =============================================================================
# EXTRACTION
# =============================================================================


@dataclass(frozen=True)
class ImportsExports:
    """Imported modules/symbols and exported symbols found in a text."""

    imports: frozenset[str] = frozenset()
    exports: frozenset[str] = frozenset()


def extract_imports_exports(content: str, language: str) -> ImportsExports:
    """Scan *content* for import and export syntax of *language*.

    Args:
        content: Raw source text of one unit.
        language: Language identifier (``"typescript"``, ``"python"``, ...).

    Returns:
        Deduplicated imports and exports. Unknown languages yield nothing.
    """
    if language in ("typescript", "tsx", "javascript"):
        return _ecmascript(content)
    if language == "python":
        return _python(content)
    if language == "go":
        return _go(content)
    if language == "rust":
        return _rust(content)
    if language == "java":
        return _java(content)
    return ImportsExports()


def _split_names(clause: str) -> list[str]:
    """``"a, b as c"`` -> ``["a", "b"]``."""
    names: list[str] = []
    for item in clause.split(","):
        name = item.strip().split(" as ")[0].strip()
        if name:
            names.append(name)
    return names


def _ecmascript(content: str) -> ImportsExports:
    imports: set[str] = set(_ES_MODULE_SOURCE.findall(content))
    for clause in _ES_NAMED_IMPORTS.findall(content):
        imports.update(_split_names(clause))
    imports.update(_ES_DEFAULT_IMPORT.findall(content))

    exports = {name for name in _ES_DECLARED_EXPORT.findall(content) if name != "default"}
    for clause in _ES_NAMED_EXPORTS.findall(content):
        exports.update(_split_names(clause))

    return ImportsExports(imports=frozenset(imports), exports=frozenset(exports))


def _python(content: str) -> ImportsExports:
    imports: set[str] = set(_PY_FROM_IMPORT.findall(content))
    for clause in _PY_IMPORT.findall(content):
        imports.update(_split_names(clause))
    exports = set(_PY_PUBLIC_DEFINITION.findall(content))
    return ImportsExports(imports=frozenset(imports), exports=frozenset(exports))


def _go(content: str) -> ImportsExports:
    imports: set[str] = set(_GO_SINGLE_IMPORT.findall(content))
    for block in _GO_IMPORT_BLOCK.findall(content):
        imports.update(_GO_QUOTED.findall(block))
    exports = set(_GO_EXPORTED.findall(content))
    return ImportsExports(imports=frozenset(imports), exports=frozenset(exports))


def _rust(content: str) -> ImportsExports:
    return ImportsExports(
        imports=frozenset(_RUST_USE.findall(content)),
        exports=frozenset(_RUST_PUBLIC_ITEM.findall(content)),
    )


def _java(content: str) -> ImportsExports:
    return ImportsExports(
        imports=frozenset(_JAVA_IMPORT.findall(content)),
        exports=frozenset(_JAVA_PUBLIC_TYPE.findall(content)),
    )
