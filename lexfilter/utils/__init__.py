"""Utility helpers for lexfilter."""

from .metrics import (
    lexicon_recall,
    shortlist_ratio,
    target_coverage,
)
from .logging import ProgressLogger

__all__ = [
    "lexicon_recall",
    "shortlist_ratio",
    "target_coverage",
    "ProgressLogger",
]
