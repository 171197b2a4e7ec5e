"""Collects wanted syntax nodes from a parse tree as owned snapshots."""

from __future__ import annotations

from collections.abc import Collection

from tree_sitter import Node

from repochunk.domain.chunking.value_objects import ASTNode
from repochunk.infrastructure.parsing.symbol_extractor import (
    extract_symbol_kind,
    extract_symbol_name,
    is_container,
)
from repochunk.shared.types import Position


def collect_nodes(root: Node, wanted_kinds: Collection[str]) -> list[ASTNode]:
    """Collect every node of a wanted kind, without symbol information.

    Args:
        root: Root of the parse tree.
        wanted_kinds: Node types to collect.

    Returns:
        Snapshots sorted by start position. Nested wanted nodes are all
        included.
    """
    return _walk(root, wanted_kinds, with_symbols=False)


def collect_nodes_with_symbols(root: Node, wanted_kinds: Collection[str]) -> list[ASTNode]:
    """Collect wanted nodes with symbol name, symbol kind and lineage.

    Lineage lists the names of enclosing container nodes, outermost first.
    """
    return _walk(root, wanted_kinds, with_symbols=True)


def _walk(root: Node, wanted_kinds: Collection[str], *, with_symbols: bool) -> list[ASTNode]:
    # Explicit stack: deeply nested trees must not hit the recursion limit.
    nodes: list[ASTNode] = []
    stack: list[tuple[Node, tuple[str, ...]]] = [(root, ())]

    while stack:
        node, lineage = stack.pop()

        if node.type in wanted_kinds:
            nodes.append(_snapshot(node, lineage, with_symbols=with_symbols))

        child_lineage = lineage
        if with_symbols and is_container(node.type):
            name = extract_symbol_name(node)
            if name:
                child_lineage = (*lineage, name)

        for child in reversed(node.children):
            stack.append((child, child_lineage))

    nodes.sort(key=lambda n: (n.start_position.row, n.start_position.column))
    return nodes


def _snapshot(node: Node, lineage: tuple[str, ...], *, with_symbols: bool) -> ASTNode:
    text = node.text.decode("utf-8", errors="replace") if node.text is not None else ""
    start = node.start_point
    end = node.end_point
    if not with_symbols:
        return ASTNode(
            kind=node.type,
            start_position=Position(row=start.row, column=start.column),
            end_position=Position(row=end.row, column=end.column),
            text=text,
        )
    return ASTNode(
        kind=node.type,
        start_position=Position(row=start.row, column=start.column),
        end_position=Position(row=end.row, column=end.column),
        text=text,
        symbol_name=extract_symbol_name(node),
        symbol_kind=extract_symbol_kind(node),
        lineage=lineage,
    )
