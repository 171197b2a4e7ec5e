"""Token-aware line splitter.

Subdivides text that exceeds a token budget into ordered, line-aligned
splits whose spans together cover every line of the text. Lines are never
cut unless a single line is over budget on its own; such a line is cut
into fragments that concatenate back to it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from repochunk.domain.chunking.tokenizer import TokenCounter
from repochunk.domain.chunking.value_objects import CodeSplit
from repochunk.shared.exceptions import InvalidBudgetError
from repochunk.shared.types import SourceSpan, TokenCount

# Tried in order when cutting an oversized line. Order does not change
# correctness, only where cuts tend to land.
LINE_DELIMITERS: tuple[str, ...] = (" ", ",", ";", "(", ")", "{", "}", "[", "]")


def _is_blank(line: str) -> bool:
    return not line.strip()


def _trailing_blanks(lines: Sequence[str]) -> int:
    count = 0
    for line in reversed(lines):
        if not _is_blank(line):
            break
        count += 1
    return count


# =============================================================================
# SPLITTER
# =============================================================================


@dataclass
class TokenAwareSplitter:
    """Greedy line accumulator backed by a token counter."""

    tokenizer: TokenCounter

    def split(self, text: str, start_line: int, max_tokens: int) -> list[CodeSplit]:
        """Split *text* into budget-conforming pieces.

        Blank lines travel with the nearest content: a blank run left over
        when a split is flushed opens the next split, and a blank run at the
        end of *text* closes the last one.

        Args:
            text: Source text, lines separated by ``\\n``.
            start_line: 1-based line number of the first line of *text*.
            max_tokens: Token budget per split.

        Returns:
            Splits in source order, spanning every line of *text*. Empty for
            blank input.

        Raises:
            InvalidBudgetError: If ``max_tokens`` is not positive.
        """
        if max_tokens <= 0:
            raise InvalidBudgetError(max_tokens)
        if not text.strip():
            return []

        splits: list[CodeSplit] = []
        buffer: list[str] = []
        buffer_start = start_line

        for offset, line in enumerate(text.split("\n")):
            line_number = start_line + offset

            if _is_blank(line):
                if not buffer:
                    buffer_start = line_number
                buffer.append(line)
                continue

            if self.tokenizer.count_tokens(line) > max_tokens:
                lead = self._flush(splits, buffer, buffer_start)
                splits.extend(self._split_long_line(line, line_number, max_tokens, lead))
                buffer = []
                continue

            if buffer and self._count("\n".join([*buffer, line])) > max_tokens:
                if len(buffer) > _trailing_blanks(buffer):
                    buffer = self._flush(splits, buffer, buffer_start)
                    buffer_start = line_number - len(buffer)
                if buffer and self._count("\n".join([*buffer, line])) > max_tokens:
                    # Only blank lines are buffered and they do not fit with
                    # this line: close the previous split with them, or cut
                    # the line so its first fragment can carry them.
                    if not self._extend_last(splits, buffer, max_tokens):
                        splits.extend(
                            self._split_long_line(line, line_number, max_tokens, buffer)
                        )
                        buffer = []
                        continue
                    buffer = []

            if not buffer:
                buffer_start = line_number
            buffer.append(line)

        self._flush_last(splits, buffer, buffer_start, max_tokens)
        return splits

    # -------------------------------------------------------------------------
    # Buffer handling
    # -------------------------------------------------------------------------

    def _flush(
        self, splits: list[CodeSplit], buffer: list[str], start_line: int
    ) -> list[str]:
        """Emit the buffered lines up to the last content line.

        Returns:
            The trailing blank lines, which the caller carries forward.
        """
        blanks = _trailing_blanks(buffer)
        lines = buffer[: len(buffer) - blanks]
        if lines:
            self._emit(splits, lines, start_line)
        return buffer[len(lines) :]

    def _flush_last(
        self, splits: list[CodeSplit], buffer: list[str], start_line: int, max_tokens: int
    ) -> None:
        """Emit the final buffer, keeping its trailing blank lines in a span."""
        if not buffer:
            return
        if len(buffer) > _trailing_blanks(buffer):
            tail = self._flush(splits, buffer, start_line)
        else:
            tail = buffer
        if tail and splits:
            self._attach_tail(splits, tail, max_tokens)

    def _attach_tail(
        self, splits: list[CodeSplit], tail: list[str], max_tokens: int
    ) -> None:
        """Extend the last split over trailing blank lines.

        When the extended split would exceed the budget, its last line moves
        into a split of its own together with the blanks. A split with no
        content line to spare keeps the blanks regardless.
        """
        last = splits.pop()
        lines = last.content.split("\n")
        extended = [*lines, *tail]
        head = lines[:-1]
        spare = len(head) > _trailing_blanks(head)
        if spare and self._count("\n".join(extended)) > max_tokens:
            self._emit(splits, head, last.span.start_line)
            self._emit(splits, [lines[-1], *tail], last.span.end_line)
            return
        self._emit(splits, extended, last.span.start_line)

    def _extend_last(
        self, splits: list[CodeSplit], blanks: list[str], max_tokens: int
    ) -> bool:
        """Append blank lines to the last split if it stays within budget."""
        if not splits:
            return False
        last = splits[-1]
        content = "\n".join([last.content, *blanks])
        if self._count(content) > max_tokens:
            return False
        splits[-1] = CodeSplit(
            content=content,
            span=SourceSpan(
                start_line=last.span.start_line, end_line=last.span.end_line + len(blanks)
            ),
            token_count=self._count(content),
        )
        return True

    def _emit(self, splits: list[CodeSplit], lines: list[str], start_line: int) -> None:
        content = "\n".join(lines)
        splits.append(
            CodeSplit(
                content=content,
                span=SourceSpan(start_line=start_line, end_line=start_line + len(lines) - 1),
                token_count=self._count(content),
            )
        )

    def _count(self, text: str) -> TokenCount:
        return TokenCount(self.tokenizer.count_tokens(text))

    # -------------------------------------------------------------------------
    # Oversized lines
    # -------------------------------------------------------------------------

    def _split_long_line(
        self, line: str, line_number: int, max_tokens: int, lead_lines: Sequence[str] = ()
    ) -> list[CodeSplit]:
        """Cut one oversized line into fragments on the same line number.

        Blank lines directly above the line open its first fragment, whose
        span then starts at the first of them. Every piece is kept, so the
        fragments concatenate back to the line exactly.
        """
        fragments: list[CodeSplit] = []
        lead = "".join(f"{blank}\n" for blank in lead_lines)
        first_line = line_number - len(lead_lines)
        remaining = line

        while remaining:
            piece = (
                self._delimited_prefix(remaining, max_tokens, lead)
                or self._character_prefix(remaining, max_tokens, lead)
                # Even one character is over budget: take it anyway so the
                # loop always advances.
                or remaining[0]
            )
            remaining = remaining[len(piece) :]

            if fragments and _is_blank(piece):
                merged = fragments[-1].content + piece
                if self._count(merged) <= max_tokens:
                    fragments[-1] = CodeSplit(
                        content=merged, span=fragments[-1].span, token_count=self._count(merged)
                    )
                    continue

            content = lead + piece
            fragments.append(
                CodeSplit(
                    content=content,
                    span=SourceSpan(start_line=first_line, end_line=line_number),
                    token_count=self._count(content),
                )
            )
            lead = ""
            first_line = line_number

        return fragments

    def _delimited_prefix(self, text: str, max_tokens: int, lead: str = "") -> str:
        """Longest delimiter-aligned prefix of *text* within budget.

        Each delimiter is scanned greedily and stops at the first part that
        would overflow. Whitespace-only prefixes are rejected so the
        character search can extend them into real content.
        """
        best = ""
        for delimiter in LINE_DELIMITERS:
            parts = text.split(delimiter)
            candidate = parts[0]
            if self._count(lead + candidate) > max_tokens:
                continue
            for part in parts[1:]:
                extended = f"{candidate}{delimiter}{part}"
                if self._count(lead + extended) > max_tokens:
                    break
                candidate = extended
            if len(candidate) > len(best):
                best = candidate
        return best if best.strip() else ""

    def _character_prefix(self, text: str, max_tokens: int, lead: str = "") -> str:
        """Binary search for the longest character prefix within budget."""
        low, high = 1, len(text)
        best = 0
        while low <= high:
            mid = (low + high) // 2
            if self._count(lead + text[:mid]) <= max_tokens:
                best = mid
                low = mid + 1
            else:
                high = mid - 1
        return text[:best]


# =============================================================================
# DIAGNOSTICS
# =============================================================================


def validate_splits(splits: Sequence[CodeSplit]) -> list[str]:
    """Describe every structural problem in a split sequence.

    Checks that each split's content has as many lines as its span, that
    token counts are positive, and that consecutive splits do not overlap.
    Fragments of one oversized line share that line, so consecutive splits
    may meet on a single boundary line.

    Returns:
        Human-readable problem descriptions; empty when the splits are valid.
    """
    problems: list[str] = []
    for index, split in enumerate(splits):
        content_lines = split.content.count("\n") + 1
        if content_lines != len(split.span):
            problems.append(
                f"split {index}: content has {content_lines} lines "
                f"but span covers {len(split.span)}"
            )
        if split.token_count <= 0:
            problems.append(f"split {index}: invalid token count {split.token_count}")

    for previous, current in zip(splits, splits[1:], strict=False):
        if current.span.start_line < previous.span.end_line:
            problems.append(
                f"overlap between splits: {previous.span.end_line} > "
                f"{current.span.start_line}"
            )
    return problems
