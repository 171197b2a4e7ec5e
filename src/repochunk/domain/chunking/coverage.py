"""Gap/coverage compositor.

Walks the position-sorted nodes alongside the source lines with a moving
line cursor and emits a gap for every stretch no node covers, so that
every line of the file lands in exactly one unit. The only exception is a
stretch of nothing but blank lines, which yields no unit at all.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from repochunk.domain.chunking.value_objects import (
    ASTNode,
    CodeGap,
    CoverageUnit,
    CoveredNode,
)
from repochunk.shared.types import SourceSpan

# =============================================================================
# LINES
# =============================================================================


def source_lines(text: str) -> list[str]:
    """Split *text* into lines numbered the way the parser numbers rows.

    Only ``\\n`` separates lines. A final newline terminates the last line
    rather than opening an empty one.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def _slice(lines: Sequence[str], start_line: int, end_line: int) -> str:
    return "\n".join(lines[start_line - 1 : end_line])


# =============================================================================
# COMPOSITOR
# =============================================================================


def compose(source_text: str, nodes: Sequence[ASTNode]) -> list[CoverageUnit]:
    """Interleave nodes and gaps so every line is covered once.

    Args:
        source_text: The complete file content.
        nodes: Collected nodes sorted by start position.

    Returns:
        Units in line order. Spans are non-overlapping and a gap spans the
        whole stretch between its neighbours. Lines outside every span belong
        to an all-blank stretch.
    """
    lines = source_lines(source_text)
    total_lines = len(lines)
    units: list[CoverageUnit] = []
    cursor = 1

    for node in nodes:
        start_line = max(node.start_line, cursor)
        end_line = min(node.end_line, total_lines)
        if end_line < start_line:
            # Nested inside a unit that was already emitted.
            continue

        if cursor < start_line:
            _emit_gap(units, lines, cursor, start_line - 1)

        content = _slice(lines, start_line, end_line)
        if content.strip():
            units.append(
                CoveredNode(
                    node=node,
                    content=content,
                    span=SourceSpan(start_line=start_line, end_line=end_line),
                )
            )
        cursor = end_line + 1

    if cursor <= total_lines:
        _emit_gap(units, lines, cursor, total_lines)

    return units


def _emit_gap(
    units: list[CoverageUnit], lines: Sequence[str], start_line: int, end_line: int
) -> None:
    """Append the gap over the given lines unless they are all blank."""
    content = _slice(lines, start_line, end_line)
    if not content.strip():
        return
    units.append(
        CodeGap(
            content=content,
            span=SourceSpan(start_line=start_line, end_line=end_line),
        )
    )


def extract_gaps(source_text: str, nodes: Sequence[ASTNode]) -> list[CodeGap]:
    """The gap units alone, in line order."""
    return [unit for unit in compose(source_text, nodes) if isinstance(unit, CodeGap)]


# =============================================================================
# VALIDATION
# =============================================================================


@dataclass(frozen=True)
class CoverageReport:
    """How completely a set of spans covers a file."""

    total_lines: int
    covered_lines: int
    blank_missing_lines: int = 0
    missing_ranges: list[SourceSpan] = field(default_factory=list[SourceSpan])
    overlapping_ranges: list[SourceSpan] = field(default_factory=list[SourceSpan])

    @property
    def is_complete(self) -> bool:
        return not self.missing_ranges and not self.overlapping_ranges

    @property
    def only_blank_lines_missing(self) -> bool:
        """True when every uncovered line is blank and nothing overlaps."""
        missing = sum(len(run) for run in self.missing_ranges)
        return not self.overlapping_ranges and missing == self.blank_missing_lines

    @property
    def coverage_percentage(self) -> float:
        if self.total_lines == 0:
            return 100.0
        return self.covered_lines / self.total_lines * 100


def validate_coverage(source_text: str, spans: Iterable[SourceSpan]) -> CoverageReport:
    """Check *spans* against the lines of *source_text*.

    Fragments of one oversized line share that line, so spans may meet on a
    boundary line. A line counts as overlapping when it lies strictly inside
    one span and another covers it too, or when two multi-line spans both
    start or both end on it. Every uncovered line is
    reported missing, blank or not; the report counts the blank ones.
    """
    lines = source_lines(source_text)
    total_lines = len(lines)
    hits = [0] * (total_lines + 1)
    interior = [False] * (total_lines + 1)
    starts: Counter[int] = Counter()
    ends: Counter[int] = Counter()
    for span in set(spans):
        if len(span) > 1:
            starts[span.start_line] += 1
            ends[span.end_line] += 1
        for line in range(span.start_line, min(span.end_line, total_lines) + 1):
            hits[line] += 1
            if span.start_line < line < span.end_line:
                interior[line] = True

    line_numbers = range(1, total_lines + 1)
    missing = [line for line in line_numbers if hits[line] == 0]
    overlapping = [
        line
        for line in line_numbers
        if (hits[line] > 1 and interior[line]) or starts[line] > 1 or ends[line] > 1
    ]

    return CoverageReport(
        total_lines=total_lines,
        covered_lines=total_lines - len(missing),
        blank_missing_lines=sum(1 for line in missing if not lines[line - 1].strip()),
        missing_ranges=_group_runs(missing),
        overlapping_ranges=_group_runs(overlapping),
    )


def _group_runs(line_numbers: list[int]) -> list[SourceSpan]:
    """Collapse sorted line numbers into contiguous spans."""
    runs: list[SourceSpan] = []
    for line in line_numbers:
        if runs and runs[-1].end_line == line - 1:
            runs[-1] = SourceSpan(start_line=runs[-1].start_line, end_line=line)
        else:
            runs.append(SourceSpan(start_line=line, end_line=line))
    return runs
