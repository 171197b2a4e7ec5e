"""Fixtures for tree-sitter parsing tests (real grammars)."""

from __future__ import annotations

import textwrap

from collections.abc import Callable

import pytest

from tree_sitter import Node

from repochunk.infrastructure.constants import SupportedLanguage
from repochunk.infrastructure.parsing.tree_sitter_parser import parse_source
from repochunk.shared.types import FilePath

ParseFn = Callable[[str, SupportedLanguage], Node]


@pytest.fixture
def parse_root() -> ParseFn:
    """Parse dedented source and return the root node."""

    def parse(code: str, lang: SupportedLanguage) -> Node:
        tree = parse_source(textwrap.dedent(code), lang, FilePath(f"sample.{lang}"))
        return tree.root_node

    return parse


@pytest.fixture
def typescript_source() -> str:
    return """\
        import { readFile } from "fs";

        export class Store {
          get(key: string): string {
            return key;
          }
        }

        export const LIMIT = 10;

        interface Shape {
          area(): number;
        }

        type Id = string;

        enum Color {
          Red,
        }
        """


@pytest.fixture
def python_source() -> str:
    return """\
        import os


        class Greeter:
            def greet(self, name):
                return name


        def main():
            print(Greeter().greet("x"))
        """
