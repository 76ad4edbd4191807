"""Batch-by-batch translation of SRT content with structural reconciliation."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional

from .batcher import make_batches, resolve_batch_size
from .models import (
    Batch,
    BatchReport,
    BatchStatus,
    Provenance,
    RunState,
    SrtEntry,
    TranslationOutcome,
    TranslationRun,
)
from .parser import format_srt, parse_srt

logger = logging.getLogger(__name__)

# 外部注入的翻译函数：SRT 文本 -> 翻译后的 SRT 文本
TranslateFunc = Callable[[str], Awaitable[str]]

# 每个 batch 完成后的回调（进度显示等）
BatchCallback = Callable[[BatchReport, TranslationRun], None]


def _reconcile(
    batch: Batch,
    candidates: List[SrtEntry],
) -> tuple[BatchStatus, List[TranslationOutcome]]:
    """
    Pair translated entries with the originals by position.

    Label and timing always come from the original entry; only the
    candidate's text is used.
    """
    if len(candidates) == len(batch):
        return BatchStatus.RECONCILED, [
            TranslationOutcome(original.copy(text=candidate.text), Provenance.TRANSLATED)
            for original, candidate in zip(batch, candidates)
        ]

    outcomes: List[TranslationOutcome] = []
    for i, original in enumerate(batch):
        text = candidates[i].text if i < len(candidates) else original.text
        outcomes.append(
            TranslationOutcome(original.copy(text=text), Provenance.RECOVERED_PARTIAL)
        )
    return BatchStatus.RECOVERED, outcomes


async def translate_batch(
    batch: Batch,
    translate_func: TranslateFunc,
    index: int = 0,
) -> BatchReport:
    """
    Translate one batch with a single call to ``translate_func``.

    Never raises for a failed call: the entries are kept unchanged and
    the report is marked FAILED.

    Args:
        batch: Non-empty list of entries
        translate_func: Async function mapping SRT text to translated SRT text
        index: Zero-based batch position, used in reports and logs

    Returns:
        BatchReport with one outcome per entry, in order
    """
    report = BatchReport(index=index, entries=batch, status=BatchStatus.TRANSLATING)
    payload = format_srt(batch)

    try:
        translated = await translate_func(payload)
    except Exception as e:
        logger.error(f"Batch {index + 1} translation failed, keeping original text: {e}")
        report.status = BatchStatus.FAILED
        report.error = str(e) or type(e).__name__
        report.outcomes = [
            TranslationOutcome(entry.copy(), Provenance.ORIGINAL) for entry in batch
        ]
        return report

    candidates = parse_srt(translated)
    report.status, report.outcomes = _reconcile(batch, candidates)

    if report.status is BatchStatus.RECOVERED:
        logger.warning(
            f"Batch {index + 1} structure mismatch: "
            f"expected {len(batch)} entries, got {len(candidates)}"
        )

    return report


async def translate_srt(
    content: str,
    translate_func: TranslateFunc,
    max_batch_chars: Optional[int] = None,
    on_batch_done: Optional[BatchCallback] = None,
) -> TranslationRun:
    """
    Translate SRT content batch by batch.

    Batches are sent one at a time, each call awaited before the next
    starts. The run always completes; callers inspect the provenance of
    each outcome to see what was actually translated.

    Args:
        content: Raw SRT content
        translate_func: Async function mapping SRT text to translated SRT text
        max_batch_chars: Approximate characters per request (default 2000)
        on_batch_done: Optional callback invoked after every batch

    Returns:
        Completed TranslationRun with outcomes and serialized text
    """
    run = TranslationRun()
    entries = parse_srt(content)
    batches = make_batches(entries, resolve_batch_size(max_batch_chars))

    run.total_entries = len(entries)
    run.total_batches = len(batches)
    run.state = RunState.RUNNING

    logger.info(f"Processing {len(entries)} entries in {len(batches)} batches")

    for i, batch in enumerate(batches):
        logger.debug(f"Translating batch {i + 1}/{len(batches)} with {len(batch)} entries")

        report = await translate_batch(batch, translate_func, index=i)
        run.reports.append(report)
        run.outcomes.extend(report.outcomes)

        if on_batch_done is not None:
            try:
                on_batch_done(report, run)
            except Exception as e:
                logger.warning(f"Batch callback failed after batch {i + 1}: {e}")

    run.text = format_srt(run.entries)
    run.state = RunState.COMPLETED

    counts = run.provenance_counts()
    logger.info(
        f"Run complete: {counts[Provenance.TRANSLATED]} translated, "
        f"{counts[Provenance.RECOVERED_PARTIAL]} recovered, "
        f"{counts[Provenance.ORIGINAL]} original"
    )
    return run
