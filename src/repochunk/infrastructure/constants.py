"""Infrastructure-layer constants and enums.

Eliminates magic strings across all infrastructure modules.
"""

from __future__ import annotations

from enum import StrEnum

# =============================================================================
# LANGUAGE IDENTIFIERS
# =============================================================================


class SupportedLanguage(StrEnum):
    """Grammar identifiers recognized by the parser."""

    TYPESCRIPT = "typescript"
    TSX = "tsx"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    GO = "go"
    RUST = "rust"
    JAVA = "java"


class FileExtension(StrEnum):
    """File extensions mapped to languages."""

    TS = ".ts"
    MTS = ".mts"
    CTS = ".cts"
    TSX = ".tsx"
    JS = ".js"
    MJS = ".mjs"
    CJS = ".cjs"
    JSX = ".jsx"
    PY = ".py"
    GO = ".go"
    RS = ".rs"
    JAVA = ".java"


EXTENSION_TO_LANGUAGE: dict[FileExtension, SupportedLanguage] = {
    FileExtension.TS: SupportedLanguage.TYPESCRIPT,
    FileExtension.MTS: SupportedLanguage.TYPESCRIPT,
    FileExtension.CTS: SupportedLanguage.TYPESCRIPT,
    FileExtension.TSX: SupportedLanguage.TSX,
    FileExtension.JS: SupportedLanguage.JAVASCRIPT,
    FileExtension.MJS: SupportedLanguage.JAVASCRIPT,
    FileExtension.CJS: SupportedLanguage.JAVASCRIPT,
    FileExtension.JSX: SupportedLanguage.JAVASCRIPT,
    FileExtension.PY: SupportedLanguage.PYTHON,
    FileExtension.GO: SupportedLanguage.GO,
    FileExtension.RS: SupportedLanguage.RUST,
    FileExtension.JAVA: SupportedLanguage.JAVA,
}

LANGUAGE_TO_PACKAGE: dict[SupportedLanguage, str] = {
    SupportedLanguage.TYPESCRIPT: "tree_sitter_typescript",
    SupportedLanguage.TSX: "tree_sitter_typescript",
    SupportedLanguage.JAVASCRIPT: "tree_sitter_javascript",
    SupportedLanguage.PYTHON: "tree_sitter_python",
    SupportedLanguage.GO: "tree_sitter_go",
    SupportedLanguage.RUST: "tree_sitter_rust",
    SupportedLanguage.JAVA: "tree_sitter_java",
}

# Grammar packages exposing more than one language name their entry points.
LANGUAGE_TO_ENTRY_POINT: dict[SupportedLanguage, str] = {
    SupportedLanguage.TYPESCRIPT: "language_typescript",
    SupportedLanguage.TSX: "language_tsx",
}

LANGUAGE_DISPLAY_NAMES: dict[SupportedLanguage, str] = {
    SupportedLanguage.TSX: "typescript",
}


# =============================================================================
# TREE-SITTER NODE TYPES
# =============================================================================


class ContainerNodeType(StrEnum):
    """AST node types whose name becomes part of their descendants' lineage."""

    CLASS_DECLARATION = "class_declaration"
    ABSTRACT_CLASS_DECLARATION = "abstract_class_declaration"
    CLASS_DEFINITION = "class_definition"
    RECORD_DECLARATION = "record_declaration"
    INTERFACE_DECLARATION = "interface_declaration"
    NAMESPACE_DECLARATION = "namespace_declaration"
    INTERNAL_MODULE = "internal_module"
    MODULE_DECLARATION = "module_declaration"
    MODULE = "module"
    MOD_ITEM = "mod_item"
    ENUM_DECLARATION = "enum_declaration"
    ENUM_ITEM = "enum_item"
    TRAIT_ITEM = "trait_item"
    IMPL_ITEM = "impl_item"


CONTAINER_NODE_TYPES: frozenset[str] = frozenset(ContainerNodeType)

TYPESCRIPT_WANTED_NODES: frozenset[str] = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "method_definition",
        "class_declaration",
        "abstract_class_declaration",
        "interface_declaration",
        "type_alias_declaration",
        "enum_declaration",
        "namespace_declaration",
        "internal_module",
        "module_declaration",
        "module",
        "variable_declaration",
        "lexical_declaration",
        "import_statement",
        "export_statement",
    }
)

JAVASCRIPT_WANTED_NODES: frozenset[str] = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "method_definition",
        "class_declaration",
        "variable_declaration",
        "lexical_declaration",
        "import_statement",
        "export_statement",
    }
)

PYTHON_WANTED_NODES: frozenset[str] = frozenset(
    {
        "function_definition",
        "class_definition",
        "decorated_definition",
        "import_statement",
        "import_from_statement",
    }
)

GO_WANTED_NODES: frozenset[str] = frozenset(
    {
        "function_declaration",
        "method_declaration",
        "type_declaration",
        "import_declaration",
        "const_declaration",
        "var_declaration",
    }
)

RUST_WANTED_NODES: frozenset[str] = frozenset(
    {
        "function_item",
        "struct_item",
        "enum_item",
        "trait_item",
        "impl_item",
        "mod_item",
        "type_item",
        "const_item",
        "static_item",
        "use_declaration",
        "macro_definition",
    }
)

JAVA_WANTED_NODES: frozenset[str] = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "enum_declaration",
        "record_declaration",
        "method_declaration",
        "constructor_declaration",
        "import_declaration",
    }
)

WANTED_NODES: dict[SupportedLanguage, frozenset[str]] = {
    SupportedLanguage.TYPESCRIPT: TYPESCRIPT_WANTED_NODES,
    SupportedLanguage.TSX: TYPESCRIPT_WANTED_NODES,
    SupportedLanguage.JAVASCRIPT: JAVASCRIPT_WANTED_NODES,
    SupportedLanguage.PYTHON: PYTHON_WANTED_NODES,
    SupportedLanguage.GO: GO_WANTED_NODES,
    SupportedLanguage.RUST: RUST_WANTED_NODES,
    SupportedLanguage.JAVA: JAVA_WANTED_NODES,
}


# =============================================================================
# TOKENIZER MODELS
# =============================================================================

MODEL_TO_ENCODING: dict[str, str] = {
    "text-embedding-3-large": "cl100k_base",
    "text-embedding-3-small": "cl100k_base",
    "text-embedding-ada-002": "cl100k_base",
    "gpt-4": "cl100k_base",
    "gpt-3.5-turbo": "cl100k_base",
    "gpt-4o": "o200k_base",
    "gpt-4o-mini": "o200k_base",
}
"""Known models and their tiktoken encodings; others fall back to cl100k_base."""
