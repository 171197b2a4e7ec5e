"""Fixtures for chunking domain tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from repochunk.domain.chunking.value_objects import ASTNode
from repochunk.shared.types import Position

NodeFactory = Callable[..., ASTNode]


@pytest.fixture
def make_node() -> NodeFactory:
    """Build an ASTNode from 1-based inclusive line numbers."""

    def factory(
        start_line: int,
        end_line: int,
        *,
        kind: str = "function_declaration",
        symbol_name: str | None = None,
        symbol_kind: str | None = None,
        lineage: tuple[str, ...] = (),
        start_column: int = 0,
        end_column: int = 1,
    ) -> ASTNode:
        return ASTNode(
            kind=kind,
            start_position=Position(row=start_line - 1, column=start_column),
            end_position=Position(row=end_line - 1, column=end_column),
            text="",
            symbol_name=symbol_name,
            symbol_kind=symbol_kind,
            lineage=lineage,
        )

    return factory


@pytest.fixture
def ts_source() -> str:
    return (
        'import { readFile } from "fs";\n'
        "\n"
        "const LIMIT = 10;\n"
        "\n"
        "export function load(path: string): string {\n"
        "  return readFile(path);\n"
        "}\n"
        "\n"
        "console.log(load('x'));\n"
    )
