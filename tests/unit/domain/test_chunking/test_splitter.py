"""Tests for the token-aware line splitter."""

from __future__ import annotations

import pytest

from repochunk.domain.chunking.splitter import TokenAwareSplitter, validate_splits
from repochunk.domain.chunking.tokenizer import TokenCounter
from repochunk.domain.chunking.value_objects import CodeSplit
from repochunk.shared.exceptions import InvalidBudgetError, TokenProcessingError
from repochunk.shared.types import SourceSpan, TokenCount

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def splitter(token_counter: TokenCounter) -> TokenAwareSplitter:
    return TokenAwareSplitter(tokenizer=token_counter)


def _spans(splits: list[CodeSplit]) -> list[tuple[int, int]]:
    return [(s.span.start_line, s.span.end_line) for s in splits]


class _CharCounter:
    """One token per character, whitespace included."""

    def count_tokens(self, text: str) -> int:
        return len(text)

    def dispose(self) -> None:
        pass


# =============================================================================
# Budget validation and trivial input
# =============================================================================


@pytest.mark.parametrize("budget", [0, -5])
def test_rejects_non_positive_budget(splitter: TokenAwareSplitter, budget: int) -> None:
    with pytest.raises(InvalidBudgetError) as exc_info:
        splitter.split("a b c", 1, budget)
    assert isinstance(exc_info.value, TokenProcessingError)


@pytest.mark.parametrize("text", ["", "   ", "\n\n", " \n\t\n"])
def test_blank_input_yields_nothing(splitter: TokenAwareSplitter, text: str) -> None:
    assert splitter.split(text, 1, 10) == []


def test_text_within_budget_is_one_split(splitter: TokenAwareSplitter) -> None:
    splits = splitter.split("a b\nc d", 4, 10)
    assert _spans(splits) == [(4, 5)]
    assert splits[0].content == "a b\nc d"
    assert splits[0].token_count == 4


# =============================================================================
# Line accumulation
# =============================================================================


def test_greedy_accumulation(splitter: TokenAwareSplitter) -> None:
    text = "\n".join(["a b c"] * 4)

    splits = splitter.split(text, 10, 7)

    assert _spans(splits) == [(10, 11), (12, 13)]
    assert all(s.token_count <= 7 for s in splits)


def test_blank_lines_stay_in_the_spans(splitter: TokenAwareSplitter) -> None:
    text = "a b c\n\nd e f\n\ng h i"

    splits = splitter.split(text, 1, 6)

    assert _spans(splits) == [(1, 3), (4, 5)]
    assert splits[0].content == "a b c\n\nd e f"
    assert splits[1].content == "\ng h i"


def test_blank_run_inside_budget_is_covered(splitter: TokenAwareSplitter) -> None:
    splits = splitter.split("a b c\nd e f\n\n\ng h i", 1, 12)

    assert _spans(splits) == [(1, 5)]
    assert splits[0].content == "a b c\nd e f\n\n\ng h i"


def test_trailing_blank_lines_close_the_last_split(splitter: TokenAwareSplitter) -> None:
    splits = splitter.split("a b c\nd e f\n\n", 1, 12)

    assert _spans(splits) == [(1, 4)]
    assert splits[0].content == "a b c\nd e f\n\n"


def test_trailing_blank_lines_over_budget_take_the_last_line() -> None:
    splitter = TokenAwareSplitter(tokenizer=_CharCounter())

    splits = splitter.split("ab\ncd\n\n", 1, 6)

    assert [(s.content, s.span.start_line, s.span.end_line) for s in splits] == [
        ("ab", 1, 1),
        ("cd\n\n", 2, 4),
    ]
    assert all(s.token_count <= 6 for s in splits)


def test_token_count_is_measured_on_content(
    splitter: TokenAwareSplitter, token_counter: TokenCounter
) -> None:
    text = "x = foo(1, 2)\ny = bar(3)\nz = baz()\n"
    for split in splitter.split(text, 1, 8):
        assert split.token_count == token_counter.count_tokens(split.content)
        assert split.token_count <= 8


def test_splits_reassemble_to_non_blank_lines(splitter: TokenAwareSplitter) -> None:
    lines = [f"value_{i} = compute({i}, {i + 1})" for i in range(30)]
    text = "\n".join(lines)

    splits = splitter.split(text, 1, 25)

    rebuilt = "\n".join(s.content for s in splits)
    assert rebuilt == text
    assert validate_splits(splits) == []


# =============================================================================
# Oversized lines
# =============================================================================


def test_long_line_is_cut_into_same_line_fragments(splitter: TokenAwareSplitter) -> None:
    line = ", ".join(f"item{i}" for i in range(400))
    assert len(line) > 2000

    splits = splitter.split(line, 7, 50)

    assert len(splits) > 1
    assert all(s.span == SourceSpan(start_line=7, end_line=7) for s in splits)
    assert all(0 < s.token_count <= 50 for s in splits)
    assert "".join(s.content for s in splits) == line


def test_long_line_without_delimiters_uses_character_search(
    splitter: TokenAwareSplitter,
) -> None:
    line = "!" * 120

    splits = splitter.split(line, 1, 50)

    assert [len(s.content) for s in splits] == [50, 50, 20]
    assert "".join(s.content for s in splits) == line


def test_long_line_flushes_surrounding_buffer(splitter: TokenAwareSplitter) -> None:
    long_line = " ".join(["word"] * 30)
    text = f"a b\n{long_line}\nc d"

    splits = splitter.split(text, 1, 10)

    assert splits[0].content == "a b"
    assert splits[0].span == SourceSpan(start_line=1, end_line=1)
    assert splits[-1].content == "c d"
    assert splits[-1].span == SourceSpan(start_line=3, end_line=3)
    middle = splits[1:-1]
    assert all(s.span == SourceSpan(start_line=2, end_line=2) for s in middle)
    assert "".join(s.content for s in middle) == long_line


def test_leading_whitespace_of_a_long_line_is_kept() -> None:
    splitter = TokenAwareSplitter(tokenizer=_CharCounter())
    line = " " * 60 + "x" * 100

    splits = splitter.split(line, 1, 50)

    assert "".join(s.content for s in splits) == line
    assert [len(s.content) for s in splits] == [50, 50, 50, 10]
    assert all(s.span == SourceSpan(start_line=1, end_line=1) for s in splits)
    assert all(0 < s.token_count <= 50 for s in splits)


def test_blank_lines_before_a_long_line_open_its_first_fragment() -> None:
    splitter = TokenAwareSplitter(tokenizer=_CharCounter())

    splits = splitter.split("ab\n\n" + "x" * 10, 1, 5)

    assert [(s.content, s.span.start_line, s.span.end_line) for s in splits] == [
        ("ab", 1, 1),
        ("\nxxxx", 2, 3),
        ("xxxxx", 3, 3),
        ("x", 3, 3),
    ]
    assert validate_splits(splits) == []


def test_split_is_deterministic(splitter: TokenAwareSplitter) -> None:
    text = "\n".join(f"call_{i}(alpha, beta, gamma)" for i in range(20))
    assert splitter.split(text, 1, 12) == splitter.split(text, 1, 12)


# =============================================================================
# validate_splits
# =============================================================================


class TestValidateSplits:
    def test_valid_sequence(self) -> None:
        splits = [
            CodeSplit("a\nb", SourceSpan(start_line=1, end_line=2), TokenCount(2)),
            CodeSplit("c", SourceSpan(start_line=3, end_line=3), TokenCount(1)),
        ]
        assert validate_splits(splits) == []

    def test_fragments_of_one_line_do_not_overlap(self) -> None:
        span = SourceSpan(start_line=4, end_line=4)
        splits = [CodeSplit("ab", span, TokenCount(1)), CodeSplit("cd", span, TokenCount(1))]
        assert validate_splits(splits) == []

    def test_line_count_mismatch(self) -> None:
        splits = [CodeSplit("a\nb", SourceSpan(start_line=1, end_line=1), TokenCount(2))]
        problems = validate_splits(splits)
        assert len(problems) == 1
        assert "2 lines" in problems[0]

    def test_non_positive_token_count(self) -> None:
        splits = [CodeSplit("a", SourceSpan(start_line=1, end_line=1), TokenCount(0))]
        assert any("invalid token count" in p for p in validate_splits(splits))

    def test_overlap(self) -> None:
        splits = [
            CodeSplit("a\nb\nc", SourceSpan(start_line=1, end_line=3), TokenCount(3)),
            CodeSplit("b\nc\nd\ne", SourceSpan(start_line=2, end_line=5), TokenCount(4)),
        ]
        assert any("overlap" in p for p in validate_splits(splits))

    def test_splits_may_share_a_boundary_line(self) -> None:
        splits = [
            CodeSplit("\nab", SourceSpan(start_line=1, end_line=2), TokenCount(1)),
            CodeSplit("cd\n", SourceSpan(start_line=2, end_line=3), TokenCount(1)),
        ]
        assert validate_splits(splits) == []
