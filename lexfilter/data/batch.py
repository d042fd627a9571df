"""Batch utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import torch


@dataclass
class ParallelBatch:
    source: torch.Tensor
    target: torch.Tensor
    source_mask: Optional[torch.Tensor] = None
    target_mask: Optional[torch.Tensor] = None

    def __post_init__(self) -> None:
        if self.source.dim() != 2 or self.target.dim() != 2:
            raise ValueError("source and target must be (batch, length) id tensors")
        if self.source.size(0) != self.target.size(0):
            raise ValueError("source and target disagree on the batch size")

    @property
    def batch_size(self) -> int:
        return int(self.source.shape[0])

    def source_ids(self) -> List[int]:
        """Source ids in row-major order, padding excluded."""
        if self.source_mask is None:
            return self.source.reshape(-1).tolist()
        return self.source[self.source_mask.bool()].tolist()

    def target_ids(self) -> List[int]:
        """Target ids in row-major order, parallel to ``target.reshape(-1)``."""
        return self.target.reshape(-1).tolist()

    def to(self, device: torch.device | str) -> "ParallelBatch":
        def maybe(t: Optional[torch.Tensor]) -> Optional[torch.Tensor]:
            return None if t is None else t.to(device)

        kwargs: Dict[str, Optional[torch.Tensor]] = {
            "source": self.source.to(device),
            "target": self.target.to(device),
            "source_mask": maybe(self.source_mask),
            "target_mask": maybe(self.target_mask),
        }
        return ParallelBatch(**kwargs)


__all__ = ["ParallelBatch"]
