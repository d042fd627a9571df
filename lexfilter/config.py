"""Shortlist configuration and parsing of the ``filter`` option list."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from lexfilter.exceptions import ConfigError, ParseError

if TYPE_CHECKING:
    from lexfilter.data.vocab import Vocab
    from lexfilter.lexicon.table import LexiconTable

DEFAULT_FIRST_NUM = 100
DEFAULT_BEST_NUM = 100
DEFAULT_THRESHOLD = 0.0


@dataclass(frozen=True)
class ShortlistConfig:
    """Size and pruning knobs of the shortlist.

    Attributes:
        first_num: Number of most frequent target ids that are always
            shortlisted (ids ``0 .. first_num - 1``).
        best_num: Maximum number of lexicon candidates kept per source id.
        threshold: Candidates must have a probability strictly above this.
    """

    first_num: int = DEFAULT_FIRST_NUM
    best_num: int = DEFAULT_BEST_NUM
    threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        if self.first_num < 0:
            raise ConfigError(f"first_num must be non-negative, got {self.first_num}")
        if self.best_num < 0:
            raise ConfigError(f"best_num must be non-negative, got {self.best_num}")
        if not 0.0 <= self.threshold <= 1.0:
            raise ConfigError(f"threshold must lie in [0, 1], got {self.threshold}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ParseError(f"{name} must be an integer, got {value!r}") from exc


def _parse_float(name: str, value: str) -> float:
    try:
        return float(value.strip())
    except ValueError as exc:
        raise ParseError(f"{name} must be a number, got {value!r}") from exc


@dataclass(frozen=True)
class FilterOptions:
    """Lexicon path plus shortlist configuration."""

    path: str
    shortlist: ShortlistConfig = field(default_factory=ShortlistConfig)

    @classmethod
    def from_strings(cls, values: Sequence[str]) -> "FilterOptions":
        """Parse ``[path, first_num?, best_num?, threshold?]``."""
        values = list(values)
        if not values:
            raise ConfigError("No path to the lexicon given in the filter options")
        if len(values) > 4:
            raise ConfigError(f"Expected at most 4 filter options, got {len(values)}")
        path = values[0].strip()
        if not path:
            raise ConfigError("Lexicon path in the filter options is empty")

        first_num = _parse_int("first_num", values[1]) if len(values) > 1 else DEFAULT_FIRST_NUM
        best_num = _parse_int("best_num", values[2]) if len(values) > 2 else DEFAULT_BEST_NUM
        threshold = _parse_float("threshold", values[3]) if len(values) > 3 else DEFAULT_THRESHOLD
        return cls(path=path, shortlist=ShortlistConfig(first_num, best_num, threshold))

    def create_table(self, src_vocab: "Vocab", trg_vocab: "Vocab") -> "LexiconTable":
        from lexfilter.lexicon.table import LexiconTable

        if not os.path.isfile(self.path):
            raise ConfigError(f"Lexicon file does not exist: {self.path}")
        return LexiconTable.build(self.path, src_vocab, trg_vocab, self.shortlist)


__all__ = [
    "DEFAULT_BEST_NUM",
    "DEFAULT_FIRST_NUM",
    "DEFAULT_THRESHOLD",
    "FilterOptions",
    "ShortlistConfig",
]
