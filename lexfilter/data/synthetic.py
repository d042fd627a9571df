"""Synthetic parallel dataset for quick experimentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

import torch

from .batch import ParallelBatch


@dataclass
class SyntheticDatasetConfig:
    src_vocab_size: int = 64
    trg_vocab_size: int = 96
    seq_len: int = 8
    batch_size: int = 4
    num_batches: int = 20
    pad_id: int = 0
    seed: int = 0


class SyntheticParallelDataset:
    """Random source sentences with a noisy word-by-word translation.

    Target token ``t`` is derived from source token ``s`` by a fixed random
    permutation, so :meth:`lexicon_entries` describes a lexicon that
    explains most of the targets.
    """

    def __init__(self, config: SyntheticDatasetConfig, device: torch.device | str = "cpu") -> None:
        if config.trg_vocab_size < config.src_vocab_size:
            raise ValueError("trg_vocab_size must be at least src_vocab_size")
        self.config = config
        self.device = torch.device(device)
        rng = torch.Generator().manual_seed(config.seed)
        self.translation = torch.randperm(config.trg_vocab_size, generator=rng)[: config.src_vocab_size]

    def lexicon_entries(self, noise_prob: float = 0.1) -> List[Tuple[int, int, float]]:
        entries = []
        for src, trg in enumerate(self.translation.tolist()):
            if src == self.config.pad_id:
                continue
            entries.append((src, trg, 1.0 - noise_prob))
        return entries

    def __len__(self) -> int:
        return self.config.num_batches

    def __iter__(self) -> Iterator[ParallelBatch]:
        cfg = self.config
        rng = torch.Generator().manual_seed(cfg.seed + 1)
        for _ in range(cfg.num_batches):
            lengths = torch.randint(1, cfg.seq_len + 1, (cfg.batch_size,), generator=rng)
            positions = torch.arange(cfg.seq_len).unsqueeze(0)
            mask = positions < lengths.unsqueeze(1)
            src = torch.randint(1, cfg.src_vocab_size, (cfg.batch_size, cfg.seq_len), generator=rng)
            trg = self.translation[src]
            noise = torch.rand(src.shape, generator=rng) < 0.1
            trg = torch.where(noise, torch.randint(1, cfg.trg_vocab_size, src.shape, generator=rng), trg)
            src = src.masked_fill(~mask, cfg.pad_id)
            trg = trg.masked_fill(~mask, cfg.pad_id)
            yield ParallelBatch(
                source=src.to(self.device),
                target=trg.to(self.device),
                source_mask=mask.to(self.device),
                target_mask=mask.to(self.device),
            )


__all__ = ["SyntheticDatasetConfig", "SyntheticParallelDataset"]
