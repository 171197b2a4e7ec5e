"""Tests for the Batch Process use case."""

from __future__ import annotations

import threading
import time

from collections.abc import Callable

import pytest

from repochunk.application.batch_process import BatchProcessor, validate_batch_options
from repochunk.application.chunk_file import ChunkFile
from repochunk.application.dto import BatchProcessCommand, ChunkFileCommand, FileOutcome
from repochunk.domain.chunking.value_objects import FileChunk, ProcessingError
from repochunk.shared.exceptions import (
    ConfigurationError,
    InvalidBudgetError,
    ParsingError,
)
from repochunk.shared.types import ErrorKind, FilePath

WriteFn = Callable[[str, str], FilePath]

_BROKEN = "def broken(:\n    pass\n"


@pytest.fixture
def processor(use_case: ChunkFile) -> BatchProcessor:
    return BatchProcessor(chunk_file=use_case)


@pytest.fixture
def five_files(write_source: WriteFn) -> tuple[FilePath, ...]:
    return (
        write_source("a.ts", "export const a = 1;\n"),
        write_source("b.py", "def b():\n    return 2\n"),
        write_source("c.py", _BROKEN),
        write_source("d.go", "package d\n\nfunc D() int {\n\treturn 4\n}\n"),
        write_source("e.rs", "fn e() -> u8 {\n    5\n}\n"),
    )


def _cmd(paths: tuple[FilePath, ...], **overrides: object) -> BatchProcessCommand:
    options: dict[str, object] = {
        "max_tokens": 200,
        "model_name": "test-model",
        "concurrency": 2,
        "continue_on_error": True,
    }
    options.update(overrides)
    return BatchProcessCommand(file_paths=paths, **options)  # type: ignore[arg-type]


# =============================================================================
# Validation
# =============================================================================


class TestValidateBatchOptions:
    def test_accepts_defaults(self) -> None:
        validate_batch_options(BatchProcessCommand(file_paths=()))

    @pytest.mark.parametrize("budget", [0, -5])
    def test_rejects_budget(self, budget: int) -> None:
        with pytest.raises(InvalidBudgetError):
            validate_batch_options(_cmd((), max_tokens=budget))

    @pytest.mark.parametrize("concurrency", [0, -1])
    def test_rejects_concurrency(self, concurrency: int) -> None:
        with pytest.raises(ConfigurationError, match="concurrency"):
            validate_batch_options(_cmd((), concurrency=concurrency))

    def test_rejects_empty_model(self) -> None:
        with pytest.raises(ConfigurationError, match="model_name"):
            validate_batch_options(_cmd((), model_name=""))


# =============================================================================
# Runs
# =============================================================================


def test_empty_input_gives_zero_stats(processor: BatchProcessor) -> None:
    result = processor.run(_cmd(()))

    assert result.stats.files_processed == 0
    assert result.stats.chunks_created == 0
    assert result.stats.errors == []
    assert result.chunks == []


def test_one_bad_file_does_not_stop_the_batch(
    processor: BatchProcessor, five_files: tuple[FilePath, ...]
) -> None:
    result = processor.run(_cmd(five_files))

    assert result.stats.files_processed == 4
    assert result.stats.chunks_created == len(result.chunks)
    assert len(result.stats.errors) == 1

    error = result.stats.errors[0]
    assert error.kind == ErrorKind.PARSING
    assert error.recoverable
    assert error.file_path == five_files[2]
    assert result.elapsed_seconds >= 0


def test_chunks_are_sorted_by_file_then_line(
    processor: BatchProcessor, five_files: tuple[FilePath, ...]
) -> None:
    result = processor.run(_cmd(tuple(reversed(five_files)), concurrency=4))

    keys = [(str(c.metadata.file_path), c.span.start_line) for c in result.chunks]
    assert keys == sorted(keys)
    assert {c.metadata.file_path for c in result.chunks} == set(five_files) - {five_files[2]}


def test_results_do_not_depend_on_pool_size(
    processor: BatchProcessor, five_files: tuple[FilePath, ...]
) -> None:
    serial = processor.run(_cmd(five_files, concurrency=1))
    parallel = processor.run(_cmd(five_files, concurrency=8))

    assert serial.chunks == parallel.chunks
    assert serial.stats.files_processed == parallel.stats.files_processed


def test_fail_fast_raises_the_file_error(
    processor: BatchProcessor, write_source: WriteFn
) -> None:
    paths = (write_source("bad.py", _BROKEN),)

    with pytest.raises(ParsingError) as exc_info:
        processor.run(_cmd(paths, continue_on_error=False))

    assert exc_info.value.path == paths[0]


def test_invalid_budget_raises_before_any_work(
    processor: BatchProcessor, counter_factory: Callable[[str], object]
) -> None:
    with pytest.raises(InvalidBudgetError):
        processor.run(_cmd((FilePath("a.ts"),), max_tokens=0))
    assert counter_factory.created == []  # type: ignore[attr-defined]


def test_missing_files_are_file_system_errors(processor: BatchProcessor) -> None:
    result = processor.run(_cmd((FilePath("/nowhere/a.ts"), FilePath("/nowhere/b.py"))))

    assert result.stats.files_processed == 0
    assert [e.kind for e in result.stats.errors] == [ErrorKind.FILE_SYSTEM] * 2


class _InFlightRecorder:
    """ChunkFile stand-in recording how many files are chunked at once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.active = 0
        self.peak = 0
        self.seen: list[FilePath] = []

    def execute(self, cmd: ChunkFileCommand) -> list[FileChunk]:
        with self._lock:
            self.active += 1
            self.peak = max(self.peak, self.active)
            self.seen.append(cmd.file_path)
        time.sleep(0.05)
        with self._lock:
            self.active -= 1
        return []


def test_concurrency_bounds_files_in_flight() -> None:
    recorder = _InFlightRecorder()
    processor = BatchProcessor(chunk_file=recorder)  # type: ignore[arg-type]
    paths = tuple(FilePath(f"src/f{i}.ts") for i in range(6))

    result = processor.run(_cmd(paths, concurrency=2))

    assert 1 <= recorder.peak <= 2
    assert sorted(recorder.seen) == sorted(paths)
    assert result.stats.files_processed == 6
    assert result.stats.errors == []


def test_failed_outcomes_are_counted_as_errors() -> None:
    good = FileOutcome(file_path=FilePath("a.ts"))
    bad = FileOutcome(
        file_path=FilePath("b.ts"),
        error=ProcessingError.from_exception(ParsingError("bad"), FilePath("b.ts")),
    )
    assert good.ok
    assert not bad.ok

    class _Outcomes:
        def execute(self, cmd: ChunkFileCommand) -> list[FileChunk]:
            if cmd.file_path == "b.ts":
                raise ParsingError("bad", cmd.file_path)
            return []

    result = BatchProcessor(chunk_file=_Outcomes()).run(  # type: ignore[arg-type]
        _cmd((FilePath("a.ts"), FilePath("b.ts")))
    )

    assert result.stats.files_processed == 1
    assert [e.kind for e in result.stats.errors] == [ErrorKind.PARSING]
