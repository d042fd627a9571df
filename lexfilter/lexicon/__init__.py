"""Lexical translation table loading and pruning."""

from .io import LexiconLine, read_lexicon
from .table import (
    NULL_SYMBOL,
    LexiconRow,
    LexiconStats,
    LexiconTable,
    LexiconTableBuilder,
    prune_row,
)

__all__ = [
    "NULL_SYMBOL",
    "LexiconLine",
    "LexiconRow",
    "LexiconStats",
    "LexiconTable",
    "LexiconTableBuilder",
    "prune_row",
    "read_lexicon",
]
