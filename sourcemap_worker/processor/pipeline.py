from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar

from sourcemap_worker.logging.logger import Log
from sourcemap_worker.minify.exceptions import MinificationError
from sourcemap_worker.processor.exceptions import ProcessorError
from sourcemap_worker.processor.models import FileState, ProcessingRecord


class StageStatus(str, Enum):
    CONTINUE = "continue"
    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class StageResult:
    """Outcome of one stage: go on, stop quietly, or stop with a reason."""

    status: StageStatus
    reason: str = ""

    @classmethod
    def proceed(cls) -> "StageResult":
        return cls(StageStatus.CONTINUE)

    @classmethod
    def skip(cls, reason: str) -> "StageResult":
        return cls(StageStatus.SKIP, reason)

    @classmethod
    def fail(cls, reason: str) -> "StageResult":
        return cls(StageStatus.FAIL, reason)


@dataclass(slots=True)
class FileContext:
    record: ProcessingRecord
    content: bytes = b""
    code: str = ""
    source_map: str = ""
    match: Path | None = None


class PipelineStep(ABC):
    """One stage of a per-file pipeline.

    ``advances_to`` is the state the record enters once the stage succeeds;
    None leaves the state unchanged.
    """

    advances_to: ClassVar[FileState | None] = None

    def run(self, context: FileContext) -> StageResult:
        try:
            return self.execute(context)
        except (OSError, MinificationError, ProcessorError) as exc:
            return StageResult.fail(str(exc))

    @abstractmethod
    def execute(self, context: FileContext) -> StageResult:
        raise NotImplementedError


def run_steps(steps: list[PipelineStep], context: FileContext) -> ProcessingRecord:
    """Run stages in order, stopping at the first skip or failure."""
    record = context.record
    for step in steps:
        result = step.run(context)
        if result.status is StageStatus.SKIP:
            record.state = FileState.SKIPPED
            record.reason = result.reason
            return record
        if result.status is StageStatus.FAIL:
            record.state = FileState.FAILED
            record.reason = result.reason
            return record
        if step.advances_to is not None:
            record.state = step.advances_to
    record.state = FileState.DONE
    return record


def log_outcome(record: ProcessingRecord) -> None:
    """One line per file: processed, skipped, or failed."""
    if record.state is FileState.DONE:
        if record.reused_from is not None:
            Log.info(
                f"Reusing source maps for file: {record.path} from file: {record.reused_from}"
            )
        else:
            Log.info(f"Generated source map for file: {record.path}")
    elif record.state is FileState.SKIPPED:
        Log.info(f"Skipping file which already has a source map: {record.path}")
    else:
        Log.error(f"Error processing file {record.path}: {record.reason}")
