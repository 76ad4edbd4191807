"""Tests for batching."""

import pytest
from srt_batch_translator.batcher import (
    DEFAULT_MAX_BATCH_CHARS,
    ENTRY_OVERHEAD,
    estimate_entry_size,
    make_batches,
    resolve_batch_size,
)
from srt_batch_translator.models import SrtEntry


def _entries(n, text="x" * 20):
    return [SrtEntry(str(i), "00:00:01,000 --> 00:00:02,000", text) for i in range(1, n + 1)]


def _flatten(batches):
    return [e for batch in batches for e in batch]


class TestEstimateEntrySize:

    def test_estimate(self):
        entry = SrtEntry("12", "abcd", "hello")
        assert estimate_entry_size(entry) == 2 + 4 + 5 + ENTRY_OVERHEAD


class TestResolveBatchSize:

    @pytest.mark.parametrize("value", [None, 0, -5, "abc", "", "0", True, float("nan")])
    def test_invalid_falls_back(self, value):
        assert resolve_batch_size(value) == DEFAULT_MAX_BATCH_CHARS

    def test_valid(self):
        assert resolve_batch_size(500) == 500
        assert resolve_batch_size(" 750 ") == 750
        assert resolve_batch_size(1500.7) == 1500


class TestMakeBatches:

    def test_empty(self):
        assert make_batches([], 100) == []

    def test_single_batch_when_budget_large(self):
        entries = _entries(5)
        batches = make_batches(entries, 10_000)
        assert len(batches) == 1
        assert batches[0] == entries

    def test_greedy_split(self):
        entries = _entries(6)
        size = estimate_entry_size(entries[0])
        # 每个 batch 正好容纳两条
        batches = make_batches(entries, size * 2)
        assert [len(b) for b in batches] == [2, 2, 2]

    def test_boundary_is_inclusive(self):
        entries = _entries(3)
        size = estimate_entry_size(entries[0])
        batches = make_batches(entries, size * 2 + 1)
        assert [len(b) for b in batches] == [2, 1]

    @pytest.mark.parametrize("budget", [1, 40, 100, 333, 2000])
    def test_covers_and_preserves_order(self, budget):
        entries = [
            SrtEntry(str(i), "t" * (i % 7), "w" * (i * 13 % 90))
            for i in range(1, 40)
        ]
        batches = make_batches(entries, budget)
        assert _flatten(batches) == entries
        assert all(batches)

    def test_oversized_entry_is_singleton(self):
        small = SrtEntry("1", "t", "a")
        huge = SrtEntry("2", "t", "b" * 500)
        tail = SrtEntry("3", "t", "c")
        batches = make_batches([small, huge, tail], 100)
        assert batches == [[small], [huge], [tail]]

    def test_oversized_first_entry(self):
        huge = SrtEntry("1", "t", "b" * 500)
        assert make_batches([huge], 50) == [[huge]]

    def test_invalid_budget_uses_default(self):
        entries = _entries(3)
        assert make_batches(entries, 0) == make_batches(entries, DEFAULT_MAX_BATCH_CHARS)
        assert len(make_batches(entries, None)) == 1
