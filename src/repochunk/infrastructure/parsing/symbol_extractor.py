"""Symbol name and kind resolution for tree-sitter nodes.

Each wanted node type maps to a symbol kind plus the child node types that
carry its name. Composite constructs (exports, decorated definitions,
declarations wrapping declarators) resolve their name through a child.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from tree_sitter import Node

from repochunk.domain.chunking.value_objects import SymbolKind
from repochunk.infrastructure.constants import CONTAINER_NODE_TYPES

# =============================================================================
# SYMBOL TABLE
# =============================================================================

_NAME_FIELD = "name"


@dataclass(frozen=True)
class _SymbolRule:
    kind: SymbolKind
    name_types: tuple[str, ...] = ()
    name_field: str = _NAME_FIELD


_RULES: dict[str, _SymbolRule] = {
    # functions
    "function_declaration": _SymbolRule(SymbolKind.FUNCTION, ("identifier",)),
    "generator_function_declaration": _SymbolRule(SymbolKind.FUNCTION, ("identifier",)),
    "function_definition": _SymbolRule(SymbolKind.FUNCTION, ("identifier",)),
    "function_item": _SymbolRule(SymbolKind.FUNCTION, ("identifier",)),
    "macro_definition": _SymbolRule(SymbolKind.FUNCTION, ("identifier",)),
    # methods
    "method_definition": _SymbolRule(
        SymbolKind.METHOD, ("property_identifier", "private_property_identifier")
    ),
    "method_declaration": _SymbolRule(SymbolKind.METHOD, ("field_identifier", "identifier")),
    "constructor_declaration": _SymbolRule(SymbolKind.METHOD, ("identifier",)),
    # types
    "class_declaration": _SymbolRule(SymbolKind.CLASS, ("type_identifier", "identifier")),
    "abstract_class_declaration": _SymbolRule(SymbolKind.CLASS, ("type_identifier",)),
    "class_definition": _SymbolRule(SymbolKind.CLASS, ("identifier",)),
    "record_declaration": _SymbolRule(SymbolKind.CLASS, ("identifier",)),
    "interface_declaration": _SymbolRule(
        SymbolKind.INTERFACE, ("type_identifier", "identifier")
    ),
    "type_alias_declaration": _SymbolRule(SymbolKind.TYPE_ALIAS, ("type_identifier",)),
    "type_item": _SymbolRule(SymbolKind.TYPE_ALIAS, ("type_identifier",)),
    "type_declaration": _SymbolRule(SymbolKind.TYPE_ALIAS),
    "enum_declaration": _SymbolRule(SymbolKind.ENUM, ("identifier",)),
    "enum_item": _SymbolRule(SymbolKind.ENUM, ("type_identifier",)),
    "struct_item": _SymbolRule(SymbolKind.STRUCT, ("type_identifier",)),
    "trait_item": _SymbolRule(SymbolKind.TRAIT, ("type_identifier",)),
    "impl_item": _SymbolRule(SymbolKind.IMPL, ("type_identifier",), name_field="type"),
    # scopes
    "namespace_declaration": _SymbolRule(
        SymbolKind.NAMESPACE, ("identifier", "nested_identifier")
    ),
    "internal_module": _SymbolRule(SymbolKind.NAMESPACE, ("identifier", "nested_identifier")),
    "module_declaration": _SymbolRule(
        SymbolKind.MODULE, ("identifier", "nested_identifier", "string")
    ),
    "module": _SymbolRule(SymbolKind.MODULE, ("identifier", "nested_identifier", "string")),
    "mod_item": _SymbolRule(SymbolKind.MODULE, ("identifier",)),
    # bindings
    "variable_declaration": _SymbolRule(SymbolKind.VARIABLE),
    "lexical_declaration": _SymbolRule(SymbolKind.VARIABLE),
    "const_declaration": _SymbolRule(SymbolKind.VARIABLE),
    "var_declaration": _SymbolRule(SymbolKind.VARIABLE),
    "const_item": _SymbolRule(SymbolKind.VARIABLE, ("identifier",)),
    "static_item": _SymbolRule(SymbolKind.VARIABLE, ("identifier",)),
    # module wiring
    "import_statement": _SymbolRule(SymbolKind.IMPORT),
    "import_from_statement": _SymbolRule(SymbolKind.IMPORT),
    "import_declaration": _SymbolRule(SymbolKind.IMPORT),
    "use_declaration": _SymbolRule(SymbolKind.IMPORT),
    "export_statement": _SymbolRule(SymbolKind.EXPORT),
    "decorated_definition": _SymbolRule(SymbolKind.FUNCTION),
}


# =============================================================================
# HELPERS
# =============================================================================


def _text(node: Node | None) -> str | None:
    if node is None or node.text is None:
        return None
    return node.text.decode("utf-8", errors="replace")


def _first_child(node: Node, types: tuple[str, ...] | str) -> Node | None:
    wanted = (types,) if isinstance(types, str) else types
    for child in node.named_children:
        if child.type in wanted:
            return child
    return None


def _first_descendant(node: Node, types: tuple[str, ...]) -> Node | None:
    """Pre-order search below *node* for the first node of *types*."""
    stack = list(reversed(node.named_children))
    while stack:
        current = stack.pop()
        if current.type in types:
            return current
        stack.extend(reversed(current.named_children))
    return None


def _name_by_rule(node: Node, rule: _SymbolRule) -> str | None:
    field_node = node.child_by_field_name(rule.name_field)
    if field_node is not None:
        return _text(field_node)
    if rule.name_types:
        return _text(_first_child(node, rule.name_types))
    return None


# =============================================================================
# COMPOSITE RESOLVERS
# =============================================================================


def _declarator_name(node: Node) -> str | None:
    declarator = _first_child(node, ("variable_declarator", "const_spec", "var_spec"))
    if declarator is None:
        return None
    name_node = declarator.child_by_field_name(_NAME_FIELD)
    if name_node is None or name_node.type != "identifier":
        # Destructuring patterns have no single name.
        return None
    return _text(name_node)


def _export_name(node: Node) -> str | None:
    declaration = node.child_by_field_name("declaration")
    if declaration is not None:
        return extract_symbol_name(declaration)
    for child in node.named_children:
        if child.type in _RULES and child.type != "export_statement":
            return extract_symbol_name(child)
    return None


def _decorated_name(node: Node) -> str | None:
    definition = node.child_by_field_name("definition")
    return extract_symbol_name(definition) if definition is not None else None


def _import_name(node: Node) -> str | None:
    clause = _first_child(node, "import_clause")
    if clause is not None:
        # import x from / import { x } from / import * as x from
        found = _first_descendant(clause, ("identifier",))
        return _text(found)
    # Python: import a.b / import a.b as c
    module = _first_child(node, ("dotted_name", "aliased_import"))
    if module is not None and module.type == "aliased_import":
        module = module.child_by_field_name(_NAME_FIELD)
    if module is not None:
        return _text(module)
    # Side-effect import: import "./polyfill"
    source = node.child_by_field_name("source")
    name = _text(source)
    return name.strip("'\"`") if name else None


def _import_from_name(node: Node) -> str | None:
    return _text(node.child_by_field_name("module_name"))


def _import_declaration_name(node: Node) -> str | None:
    found = _first_descendant(
        node, ("interpreted_string_literal", "scoped_identifier", "identifier")
    )
    name = _text(found)
    return name.strip('"') if name else None


def _use_name(node: Node) -> str | None:
    return _text(node.child_by_field_name("argument"))


def _type_spec(node: Node) -> Node | None:
    return _first_child(node, ("type_spec", "type_alias"))


def _type_declaration_name(node: Node) -> str | None:
    spec = _type_spec(node)
    return _text(spec.child_by_field_name(_NAME_FIELD)) if spec is not None else None


_RESOLVERS: dict[str, Callable[[Node], str | None]] = {
    "variable_declaration": _declarator_name,
    "lexical_declaration": _declarator_name,
    "const_declaration": _declarator_name,
    "var_declaration": _declarator_name,
    "export_statement": _export_name,
    "decorated_definition": _decorated_name,
    "import_statement": _import_name,
    "import_from_statement": _import_from_name,
    "import_declaration": _import_declaration_name,
    "use_declaration": _use_name,
    "type_declaration": _type_declaration_name,
}

_GO_TYPE_KINDS: dict[str, SymbolKind] = {
    "struct_type": SymbolKind.STRUCT,
    "interface_type": SymbolKind.INTERFACE,
}


# =============================================================================
# PUBLIC API
# =============================================================================


def extract_symbol_name(node: Node) -> str | None:
    """Resolve the declared name of *node*, or ``None`` if it has none."""
    rule = _RULES.get(node.type)
    if rule is None:
        return None
    resolver = _RESOLVERS.get(node.type)
    if resolver is not None:
        return resolver(node)
    return _name_by_rule(node, rule)


def extract_symbol_kind(node: Node) -> str:
    """Resolve the symbol kind of *node*.

    Node types missing from the table report their raw type.
    """
    if node.type == "decorated_definition":
        definition = node.child_by_field_name("definition")
        if definition is not None:
            return extract_symbol_kind(definition)
    if node.type == "type_declaration":
        spec = _type_spec(node)
        type_node = spec.child_by_field_name("type") if spec is not None else None
        if type_node is not None and type_node.type in _GO_TYPE_KINDS:
            return _GO_TYPE_KINDS[type_node.type]
    rule = _RULES.get(node.type)
    return rule.kind if rule is not None else node.type


def is_container(node_type: str) -> bool:
    """Whether a node's name joins the lineage of the nodes beneath it."""
    return node_type in CONTAINER_NODE_TYPES


def extract_symbol(node: Node) -> tuple[str | None, str]:
    """Resolve ``(name, kind)`` for *node* in one call."""
    return extract_symbol_name(node), extract_symbol_kind(node)
