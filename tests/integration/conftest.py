"""Shared fixtures for integration tests."""

from __future__ import annotations

import textwrap

from pathlib import Path

import pytest

from repochunk.infrastructure.tokenization.tiktoken_tokenizer import TiktokenTokenizer
from repochunk.shared.exceptions import TokenProcessingError


@pytest.fixture(scope="session", autouse=True)
def _require_encoding() -> None:
    """Skip the whole suite when the encoding cannot be loaded (e.g. offline)."""
    try:
        TiktokenTokenizer().dispose()
    except TokenProcessingError as e:
        pytest.skip(f"tiktoken encoding unavailable: {e}")


@pytest.fixture
def sample_repo(tmp_path: Path) -> Path:
    """A small multi-language repository with one unparsable file."""
    files = {
        "src/server.ts": """\
            import { createServer } from "http";
            import { routes } from "./routes";

            const PORT = 8080;

            export class Server {
              private started = false;

              start(): void {
                createServer(routes).listen(PORT);
                this.started = true;
              }

              stop(): void {
                this.started = false;
              }
            }

            export function boot(): Server {
              const server = new Server();
              server.start();
              return server;
            }
        """,
        "src/routes.ts": """\
            export const routes = (req: unknown, res: { end(): void }) => res.end();
        """,
        "src/types.d.ts": """\
            declare const VERSION: string;
        """,
        "tools/report.py": """\
            import json
            from pathlib import Path


            def load(path):
                return json.loads(Path(path).read_text())


            class Report:
                def __init__(self, rows):
                    self.rows = rows

                @property
                def total(self):
                    return sum(row["n"] for row in self.rows)
        """,
        "tools/broken.py": """\
            def broken(:
                pass
        """,
        "cmd/main.go": """\
            package main

            import "fmt"

            type Greeter struct {
            \tName string
            }

            func (g Greeter) Greet() string {
            \treturn fmt.Sprintf("hello %s", g.Name)
            }

            func main() {
            \tfmt.Println(Greeter{Name: "repo"}.Greet())
            }
        """,
        "node_modules/dep/index.js": "module.exports = 1;\n",
        "README.md": "# sample\n",
    }
    for rel, content in files.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
    return tmp_path
