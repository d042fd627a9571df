"""Output layer that can score a shortlisted subset of the vocabulary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import torch
import torch.nn as nn
import torch.nn.functional as F

from lexfilter.shortlist import ShortlistResult


@dataclass
class OutputLogits:
    logits: torch.Tensor
    shortlist: Optional[ShortlistResult] = None

    @property
    def is_shortlisted(self) -> bool:
        return self.shortlist is not None


class ShortlistOutput(nn.Module):
    """Linear projection to the target vocabulary.

    With a shortlist only the selected rows of the weight matrix are used,
    so the last logit dimension is ``len(shortlist)`` instead of
    ``vocab_size`` and logit ``i`` scores vocabulary id
    ``shortlist.indices[i]``.
    """

    def __init__(self, hidden_size: int, vocab_size: int) -> None:
        super().__init__()
        self.vocab_size = vocab_size
        self.proj = nn.Linear(hidden_size, vocab_size)

    def forward(self, hidden: torch.Tensor, shortlist: Optional[ShortlistResult] = None) -> OutputLogits:
        if shortlist is None:
            return OutputLogits(logits=self.proj(hidden))
        if shortlist.indices and shortlist.indices[-1] >= self.vocab_size:
            raise ValueError(
                f"Shortlist id {shortlist.indices[-1]} exceeds output vocabulary of size {self.vocab_size}"
            )
        index = shortlist.indices_tensor(device=self.proj.weight.device)
        weight = self.proj.weight.index_select(0, index)
        bias = self.proj.bias.index_select(0, index)
        return OutputLogits(logits=F.linear(hidden, weight, bias), shortlist=shortlist)


__all__ = ["OutputLogits", "ShortlistOutput"]
