"""Data models for subtitle entries, batches and translation runs."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass
class SrtEntry:
    """Represents a single subtitle entry in SRT format."""

    sequence_label: str
    timing: str
    text: str

    def to_srt(self) -> str:
        """Convert entry to its three SRT lines (no trailing blank line)."""
        return f"{self.sequence_label}\n{self.timing}\n{self.text}"

    def copy(self, **changes) -> "SrtEntry":
        """Create a copy with optional field changes."""
        return SrtEntry(
            sequence_label=changes.get('sequence_label', self.sequence_label),
            timing=changes.get('timing', self.timing),
            text=changes.get('text', self.text),
        )


# 一个 batch 是连续、非空的条目列表
Batch = List[SrtEntry]


class Provenance(Enum):
    """How the text of an output entry was obtained."""
    TRANSLATED = "translated"                # 条数一致
    RECOVERED_PARTIAL = "recovered_partial"  # 条数不一致，按位置回收
    ORIGINAL = "original"                    # 调用失败，保留原文


class BatchStatus(Enum):
    """Lifecycle of a single batch."""
    PENDING = "pending"
    TRANSLATING = "translating"
    RECONCILED = "reconciled"
    RECOVERED = "recovered"
    FAILED = "failed"


class RunState(Enum):
    """Lifecycle of a translation run."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class TranslationOutcome:
    """Final entry for one input entry, tagged with its provenance."""
    entry: SrtEntry
    provenance: Provenance

    @property
    def text(self) -> str:
        return self.entry.text


@dataclass
class BatchReport:
    """Result of processing one batch."""
    index: int
    entries: Batch
    status: BatchStatus = BatchStatus.PENDING
    outcomes: List[TranslationOutcome] = field(default_factory=list)
    error: str = ""


@dataclass
class TranslationRun:
    """State and result of one translation run."""

    state: RunState = RunState.NOT_STARTED
    total_entries: int = 0
    total_batches: int = 0
    reports: List[BatchReport] = field(default_factory=list)
    outcomes: List[TranslationOutcome] = field(default_factory=list)
    text: str = ""

    @property
    def entries(self) -> List[SrtEntry]:
        """Final entries in output order."""
        return [o.entry for o in self.outcomes]

    @property
    def provenances(self) -> List[Provenance]:
        return [o.provenance for o in self.outcomes]

    def provenance_counts(self) -> Dict[Provenance, int]:
        """Count outcomes per provenance (every tag present, possibly 0)."""
        counts = {p: 0 for p in Provenance}
        for o in self.outcomes:
            counts[o.provenance] += 1
        return counts

    @property
    def fully_translated(self) -> bool:
        """True if every entry came back from a structurally matching batch."""
        return all(o.provenance is Provenance.TRANSLATED for o in self.outcomes)

    @property
    def failed_batches(self) -> List[BatchReport]:
        return [r for r in self.reports if r.status is BatchStatus.FAILED]

    def last_error(self) -> Optional[str]:
        """Error message of the most recent failed batch, if any."""
        for report in reversed(self.reports):
            if report.error:
                return report.error
        return None
