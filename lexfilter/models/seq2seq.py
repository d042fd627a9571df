"""Small position-aligned translation model used to exercise shortlists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import torch
import torch.nn as nn

from lexfilter.shortlist import ShortlistResult

from .output import OutputLogits, ShortlistOutput


@dataclass
class ShortlistModelConfig:
    src_vocab_size: int
    trg_vocab_size: int
    hidden_size: int = 64
    num_layers: int = 2
    num_heads: int = 4
    dropout: float = 0.1
    max_len: int = 256
    pad_id: int = 0


class SourceEncoder(nn.Module):
    """Transformer encoder over source embeddings."""

    def __init__(self, config: ShortlistModelConfig) -> None:
        super().__init__()
        self.embed = nn.Embedding(config.src_vocab_size, config.hidden_size, padding_idx=config.pad_id)
        self.positions = nn.Embedding(config.max_len, config.hidden_size)
        encoder_layer = nn.TransformerEncoderLayer(
            d_model=config.hidden_size,
            nhead=config.num_heads,
            dim_feedforward=config.hidden_size * 4,
            dropout=config.dropout,
            batch_first=True,
        )
        self.encoder = nn.TransformerEncoder(encoder_layer, num_layers=config.num_layers)

    def forward(self, source: torch.Tensor, mask: Optional[torch.Tensor] = None) -> torch.Tensor:
        steps = torch.arange(source.size(1), device=source.device)
        hidden = self.embed(source) + self.positions(steps).unsqueeze(0)
        key_padding_mask = None if mask is None else ~mask.bool()
        return self.encoder(hidden, src_key_padding_mask=key_padding_mask)


class ShortlistSeq2Seq(nn.Module):
    """Predicts the target token at every source position.

    The synthetic corpora used in the tests are word-aligned, which keeps the
    model trivial and puts the cost where it is in a real system: the
    output layer over the target vocabulary.
    """

    def __init__(self, config: ShortlistModelConfig) -> None:
        super().__init__()
        self.config = config
        self.encoder = SourceEncoder(config)
        self.output = ShortlistOutput(config.hidden_size, config.trg_vocab_size)

    def forward(
        self,
        source: torch.Tensor,
        mask: Optional[torch.Tensor] = None,
        shortlist: Optional[ShortlistResult] = None,
    ) -> OutputLogits:
        hidden = self.encoder(source, mask)
        return self.output(hidden, shortlist)


__all__ = ["ShortlistModelConfig", "ShortlistSeq2Seq", "SourceEncoder"]
