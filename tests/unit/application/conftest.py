"""Fixtures for application use case tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from repochunk.application.chunk_file import ChunkFile
from repochunk.infrastructure.parsing.tree_sitter_parser import TreeSitterParser
from repochunk.shared.types import FilePath

WriteFn = Callable[[str, str], FilePath]


@pytest.fixture
def use_case(counter_factory: Any) -> ChunkFile:
    """ChunkFile over real grammars and the deterministic fake counter."""
    return ChunkFile(parser=TreeSitterParser(), tokenizer_factory=counter_factory)


@pytest.fixture
def write_source(tmp_path: Path) -> WriteFn:
    def write(name: str, content: str) -> FilePath:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return FilePath(str(path))

    return write


@pytest.fixture
def mixed_module() -> str:
    return (
        "import os\n"
        "\n"
        "VERSION = '1.0'\n"
        "\n"
        "\n"
        "class Store:\n"
        "    def get(self, key):\n"
        "        return os.environ.get(key)\n"
        "\n"
        "    def put(self, key, value):\n"
        "        os.environ[key] = value\n"
        "\n"
        "\n"
        "def main():\n"
        "    print(Store().get('HOME'))\n"
        "\n"
        "\n"
        "if __name__ == '__main__':\n"
        "    main()\n"
    )
