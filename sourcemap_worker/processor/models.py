from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class FileKind(str, Enum):
    FINGERPRINTED = "fingerprinted"
    PLAIN = "plain"


class FileState(str, Enum):
    """Lifecycle of one file. DONE, SKIPPED and FAILED are terminal."""

    DISCOVERED = "discovered"
    ORIGINAL_SAVED = "original_saved"
    MINIFIED = "minified"
    WRITTEN = "written"
    COMPRESSED = "compressed"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


TERMINAL_STATES = frozenset({FileState.DONE, FileState.SKIPPED, FileState.FAILED})


@dataclass(frozen=True)
class ScriptFile:
    """A discovered script and its classification."""

    path: Path
    kind: FileKind


@dataclass
class ProcessingRecord:
    """Sibling paths and progress of one file while it moves through a pipeline.

    The live path is overwritten in place with the minified output, so
    ``minified`` is the same path the file was discovered under.
    """

    path: Path
    original: Path
    source_map: Path
    gzipped: Path
    state: FileState = FileState.DISCOVERED
    reason: str = ""
    reused_from: Path | None = None

    @property
    def minified(self) -> Path:
        return self.path

    @property
    def settled(self) -> bool:
        return self.state in TERMINAL_STATES


@dataclass
class BatchReport:
    """Per-file records of both phases in discovery order."""

    minified: list[ProcessingRecord] = field(default_factory=list)
    reused: list[ProcessingRecord] = field(default_factory=list)
    phase_errors: list[str] = field(default_factory=list)

    @property
    def records(self) -> list[ProcessingRecord]:
        return [*self.minified, *self.reused]

    def count(self, state: FileState) -> int:
        return sum(1 for record in self.records if record.state == state)

    @property
    def failures(self) -> int:
        return self.count(FileState.FAILED)

    @property
    def ok(self) -> bool:
        return self.failures == 0 and not self.phase_errors
