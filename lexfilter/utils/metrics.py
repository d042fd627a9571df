"""Shortlist quality metrics."""

from __future__ import annotations

from typing import Iterable, Sequence

from lexfilter.lexicon import LexiconTable
from lexfilter.shortlist import ShortlistResult


def shortlist_ratio(result: ShortlistResult, vocab_size: int) -> float:
    """Fraction of the output vocabulary the shortlist keeps."""
    return len(result) / max(vocab_size, 1)


def target_coverage(result: ShortlistResult, reference_ids: Iterable[int]) -> float:
    """Fraction of ``reference_ids`` (e.g. a held-out reference) that is shortlisted."""
    reference = list(reference_ids)
    total = max(len(reference), 1)
    hits = sum(i in result for i in reference)
    return hits / total


def lexicon_recall(table: LexiconTable, source_ids: Sequence[int], target_ids: Sequence[int]) -> float:
    """Fraction of distinct target ids predicted by the lexicon alone."""
    targets = set(target_ids)
    if not targets:
        return 0.0
    candidates = set(table.candidates(source_ids).tolist())
    return len(targets & candidates) / len(targets)


__all__ = ["lexicon_recall", "shortlist_ratio", "target_coverage"]
