"""Builds the per-batch target shortlist from a pruned lexicon."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Sequence, Set

from lexfilter.config import ShortlistConfig
from lexfilter.data.batch import ParallelBatch
from lexfilter.lexicon.table import LexiconTable
from lexfilter.shortlist.result import ShortlistResult

logger = logging.getLogger(__name__)


def build_shortlist(
    table: LexiconTable,
    config: ShortlistConfig,
    target_vocab_size: int,
    source_ids: Iterable[int],
    target_ids: Sequence[int],
    frequent_ids: Optional[Sequence[int]] = None,
) -> ShortlistResult:
    """Select the candidate vocabulary for one batch and remap its targets.

    The shortlist is the union of the ``first_num`` most frequent target ids,
    every ground-truth id in ``target_ids`` and the lexicon candidates of
    every distinct id in ``source_ids``. It is sorted ascending and each id's
    rank becomes its position in the reduced output layer.

    Unless ``frequent_ids`` is given, the most frequent ids are taken to be
    ``0 .. min(first_num, target_vocab_size) - 1``, which requires the target
    vocabulary to be ordered by descending frequency.
    """
    target_ids = [int(i) for i in target_ids]
    if any(i < 0 for i in target_ids):
        raise ValueError("Target ids must be non-negative")

    if frequent_ids is None:
        selected: Set[int] = set(range(min(config.first_num, target_vocab_size)))
    else:
        selected = {int(i) for i in frequent_ids[: config.first_num]}
    selected.update(target_ids)

    unique_sources = {int(i) for i in source_ids}
    for source_id in unique_sources:
        selected.update(table.targets(source_id).tolist())

    indices = sorted(selected)
    positions: Dict[int, int] = {token_id: pos for pos, token_id in enumerate(indices)}

    mapped: List[int] = []
    reverse: Dict[int, int] = {}
    for token_id in target_ids:
        pos = positions[token_id]
        mapped.append(pos)
        reverse[pos] = token_id

    logger.debug(
        "Shortlist of %d ids for %d source types and %d target tokens",
        len(indices),
        len(unique_sources),
        len(target_ids),
    )
    return ShortlistResult(
        indices=tuple(indices),
        mapped_indices=tuple(mapped),
        reverse=MappingProxyType(reverse),
        positions=MappingProxyType(positions),
    )


class ShortlistBuilder:
    """Shares one frozen lexicon across all batches of a run.

    :meth:`build` has no side effects, so one builder can serve several
    worker threads at once.
    """

    def __init__(
        self,
        table: LexiconTable,
        config: ShortlistConfig,
        target_vocab_size: int,
        frequent_ids: Optional[Sequence[int]] = None,
    ) -> None:
        if target_vocab_size < 0:
            raise ValueError("target_vocab_size must be non-negative")
        self.table = table
        self.config = config
        self.target_vocab_size = target_vocab_size
        self.frequent_ids = None if frequent_ids is None else tuple(int(i) for i in frequent_ids)

    def build(self, source_ids: Iterable[int], target_ids: Sequence[int]) -> ShortlistResult:
        return build_shortlist(
            self.table,
            self.config,
            self.target_vocab_size,
            source_ids,
            target_ids,
            frequent_ids=self.frequent_ids,
        )

    def build_batch(self, batch: ParallelBatch) -> ShortlistResult:
        return self.build(batch.source_ids(), batch.target_ids())


__all__ = ["ShortlistBuilder", "build_shortlist"]
