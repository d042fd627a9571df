"""Pruned source-to-target lexicon.

A :class:`LexiconTable` is built once from a lexical translation table and is
read-only afterwards. Rows live in a flat CSR layout: ``offsets[s]`` and
``offsets[s + 1]`` delimit the candidates of source id ``s`` inside the
``targets``/``probs`` arrays, sorted by target id. None of the arrays are
writeable, so a table can be shared between threads without locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple

import numpy as np

from lexfilter.config import ShortlistConfig
from lexfilter.exceptions import UnknownSymbolError
from lexfilter.lexicon.io import read_lexicon

logger = logging.getLogger(__name__)

NULL_SYMBOL = "NULL"

ID_DTYPE = np.int64
PROB_DTYPE = np.float64


class SymbolLookup(Protocol):
    """Anything that maps a symbol to its id and raises ``KeyError`` otherwise."""

    def __getitem__(self, symbol: str) -> int: ...


def _resolve(vocab: SymbolLookup, symbol: str, side: str) -> int:
    try:
        return int(vocab[symbol])
    except UnknownSymbolError:
        raise
    except KeyError as exc:
        raise UnknownSymbolError(symbol, side=side) from exc


def _readonly(values: np.ndarray) -> np.ndarray:
    values.flags.writeable = False
    return values


def prune_row(candidates: Mapping[int, float], best_num: int, threshold: float) -> List[Tuple[int, float]]:
    """Keep the ``best_num`` most probable candidates above ``threshold``.

    Candidates are ranked by ``(probability, target_id)`` descending, so ties
    on probability go to the larger target id. The result is ordered by rank.
    """
    ranked = sorted(((prob, target) for target, prob in candidates.items()), reverse=True)
    kept: List[Tuple[int, float]] = []
    for prob, target in ranked:
        if len(kept) >= best_num or prob <= threshold:
            break
        kept.append((target, prob))
    return kept


@dataclass(frozen=True)
class LexiconRow:
    """Candidates of one source id, ascending by target id."""

    targets: np.ndarray
    probs: np.ndarray

    def __len__(self) -> int:
        return int(self.targets.shape[0])

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        for target, prob in zip(self.targets.tolist(), self.probs.tolist()):
            yield target, prob

    def __contains__(self, target: int) -> bool:
        pos = int(np.searchsorted(self.targets, target))
        return pos < len(self) and int(self.targets[pos]) == target

    def to_dict(self) -> Dict[int, float]:
        return dict(self)


@dataclass(frozen=True)
class LexiconStats:
    num_rows: int
    num_nonempty_rows: int
    num_entries: int
    max_row_size: int

    @property
    def mean_row_size(self) -> float:
        if self.num_nonempty_rows == 0:
            return 0.0
        return self.num_entries / self.num_nonempty_rows


class LexiconTableBuilder:
    """Mutable staging area for a :class:`LexiconTable`.

    Entries are collected with :meth:`add` (a repeated source/target pair
    overwrites the earlier probability), pruned once with :meth:`prune`, and
    turned into an immutable table with :meth:`freeze`.
    """

    def __init__(self, config: ShortlistConfig) -> None:
        self.config = config
        self._rows: List[Dict[int, float]] = []
        self._pruned = False

    def add(self, source_id: int, target_id: int, prob: float) -> None:
        if self._pruned:
            raise RuntimeError("Cannot add entries after the lexicon has been pruned")
        if source_id < 0 or target_id < 0:
            raise ValueError(f"Token ids must be non-negative, got ({source_id}, {target_id})")
        # also rejects nan
        if not 0.0 <= prob <= 1.0:
            raise ValueError(f"Probability must lie in [0, 1], got {prob} for ({source_id}, {target_id})")
        if len(self._rows) <= source_id:
            self._rows.extend({} for _ in range(source_id + 1 - len(self._rows)))
        self._rows[source_id][target_id] = prob

    def prune(self, threshold: Optional[float] = None) -> None:
        if self._pruned:
            raise RuntimeError("Lexicon has already been pruned")
        if threshold is None:
            threshold = self.config.threshold
        before = sum(len(row) for row in self._rows)
        self._rows = [dict(prune_row(row, self.config.best_num, threshold)) for row in self._rows]
        self._pruned = True
        after = sum(len(row) for row in self._rows)
        logger.info(
            "Pruned lexicon to %d entries (dropped %d, best_num=%d, threshold=%g)",
            after,
            before - after,
            self.config.best_num,
            threshold,
        )

    def freeze(self) -> "LexiconTable":
        if not self._pruned:
            self.prune()
        offsets = np.zeros(len(self._rows) + 1, dtype=ID_DTYPE)
        targets: List[int] = []
        probs: List[float] = []
        for i, row in enumerate(self._rows):
            for target in sorted(row):
                targets.append(target)
                probs.append(row[target])
            offsets[i + 1] = len(targets)
        return LexiconTable(
            offsets=offsets,
            targets=np.asarray(targets, dtype=ID_DTYPE),
            probs=np.asarray(probs, dtype=PROB_DTYPE),
            config=self.config,
        )


class LexiconTable:
    """Read-only, source-id indexed table of pruned target candidates."""

    def __init__(
        self,
        offsets: np.ndarray,
        targets: np.ndarray,
        probs: np.ndarray,
        config: ShortlistConfig,
    ) -> None:
        if offsets.ndim != 1 or offsets.shape[0] < 1 or int(offsets[0]) != 0:
            raise ValueError("offsets must be a 1-D array starting at 0")
        if targets.shape != probs.shape or int(offsets[-1]) != targets.shape[0]:
            raise ValueError("offsets, targets and probs are inconsistent")
        self.config = config
        self._offsets = _readonly(np.array(offsets, dtype=ID_DTYPE))
        self._targets = _readonly(np.array(targets, dtype=ID_DTYPE))
        self._probs = _readonly(np.array(probs, dtype=PROB_DTYPE))

    @classmethod
    def build(
        cls,
        path: str,
        src_vocab: SymbolLookup,
        trg_vocab: SymbolLookup,
        config: ShortlistConfig,
        null_symbol: str = NULL_SYMBOL,
    ) -> "LexiconTable":
        """Load ``target source probability`` lines from ``path`` and prune them."""
        builder = LexiconTableBuilder(config)
        num_lines = 0
        num_null = 0
        for entry in read_lexicon(path):
            num_lines += 1
            if entry.source == null_symbol or entry.target == null_symbol:
                num_null += 1
                continue
            source_id = _resolve(src_vocab, entry.source, "source")
            target_id = _resolve(trg_vocab, entry.target, "target")
            builder.add(source_id, target_id, entry.prob)
        logger.info(
            "Read %d lexicon lines from %s (%d NULL alignments skipped)",
            num_lines,
            path,
            num_null,
        )
        return builder.freeze()

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Tuple[int, int, float]],
        config: ShortlistConfig,
    ) -> "LexiconTable":
        """Build from ``(source_id, target_id, probability)`` triples."""
        builder = LexiconTableBuilder(config)
        for source_id, target_id, prob in entries:
            builder.add(int(source_id), int(target_id), float(prob))
        return builder.freeze()

    def __len__(self) -> int:
        return int(self._offsets.shape[0]) - 1

    def __repr__(self) -> str:
        return f"LexiconTable(rows={len(self)}, entries={self.num_entries})"

    @property
    def num_entries(self) -> int:
        return int(self._targets.shape[0])

    def _bounds(self, source_id: int) -> Tuple[int, int]:
        if not 0 <= source_id < len(self):
            return 0, 0
        return int(self._offsets[source_id]), int(self._offsets[source_id + 1])

    def row(self, source_id: int) -> LexiconRow:
        """Candidates of ``source_id``; empty for ids the lexicon never saw."""
        start, end = self._bounds(source_id)
        return LexiconRow(targets=self._targets[start:end], probs=self._probs[start:end])

    def targets(self, source_id: int) -> np.ndarray:
        start, end = self._bounds(source_id)
        return self._targets[start:end]

    def probability(self, source_id: int, target_id: int) -> float:
        start, end = self._bounds(source_id)
        pos = start + int(np.searchsorted(self._targets[start:end], target_id))
        if pos < end and int(self._targets[pos]) == target_id:
            return float(self._probs[pos])
        return 0.0

    def candidates(self, source_ids: Sequence[int]) -> np.ndarray:
        """Sorted union of the target candidates of all ``source_ids``."""
        unique = np.unique(np.asarray(source_ids, dtype=ID_DTYPE))
        unique = unique[(unique >= 0) & (unique < len(self))]
        if unique.size == 0:
            return np.empty(0, dtype=ID_DTYPE)
        rows = [self._targets[self._offsets[s]:self._offsets[s + 1]] for s in unique]
        return np.unique(np.concatenate(rows))

    def stats(self) -> LexiconStats:
        sizes = np.diff(self._offsets)
        return LexiconStats(
            num_rows=len(self),
            num_nonempty_rows=int(np.count_nonzero(sizes)),
            num_entries=self.num_entries,
            max_row_size=int(sizes.max()) if sizes.size else 0,
        )


__all__ = [
    "LexiconRow",
    "LexiconStats",
    "LexiconTable",
    "LexiconTableBuilder",
    "NULL_SYMBOL",
    "SymbolLookup",
    "prune_row",
]
