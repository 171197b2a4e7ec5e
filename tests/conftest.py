"""Fixtures shared by every test layer."""

from __future__ import annotations

import re

from collections.abc import Callable

import pytest

from repochunk.shared.exceptions import TokenProcessingError


class FakeTokenCounter:
    """Deterministic counter: one token per word and per punctuation mark."""

    _TOKEN = re.compile(r"\w+|[^\w\s]")

    def __init__(self) -> None:
        self.disposed = False
        self.calls = 0

    def count_tokens(self, text: str) -> int:
        if self.disposed:
            msg = "tokenizer has been disposed"
            raise TokenProcessingError(msg)
        self.calls += 1
        return len(self._TOKEN.findall(text))

    def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def token_counter() -> FakeTokenCounter:
    return FakeTokenCounter()


@pytest.fixture
def counter_factory() -> Callable[[str], FakeTokenCounter]:
    """A factory recording every counter it hands out in ``.created``."""
    created: list[FakeTokenCounter] = []

    def factory(model_name: str) -> FakeTokenCounter:
        counter = FakeTokenCounter()
        created.append(counter)
        return counter

    factory.created = created  # type: ignore[attr-defined]
    return factory
