"""Cross entropy over shortlisted logits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import torch
import torch.nn.functional as F

from lexfilter.models.output import OutputLogits
from lexfilter.shortlist import ShortlistResult


@dataclass
class LossOutput:
    loss: torch.Tensor
    num_tokens: int


def _masked_mean(losses: torch.Tensor, mask: Optional[torch.Tensor]) -> LossOutput:
    if mask is None:
        return LossOutput(loss=losses.mean(), num_tokens=int(losses.numel()))
    weights = mask.reshape(-1).to(losses.dtype)
    num_tokens = int(weights.sum().item())
    loss = (losses * weights).sum() / max(num_tokens, 1)
    return LossOutput(loss=loss, num_tokens=num_tokens)


def shortlist_cross_entropy(
    logits: torch.Tensor,
    shortlist: ShortlistResult,
    mask: Optional[torch.Tensor] = None,
) -> LossOutput:
    """Mean cross entropy of ``logits`` against the remapped targets.

    ``logits`` has shape ``(..., len(shortlist))`` and its leading dimensions
    must hold exactly as many elements as the target sequence the shortlist
    was built from.
    """
    if logits.size(-1) != len(shortlist):
        raise ValueError(
            f"Logit dimension {logits.size(-1)} does not match shortlist size {len(shortlist)}"
        )
    flat_logits = logits.reshape(-1, logits.size(-1))
    if flat_logits.size(0) != len(shortlist.mapped_indices):
        raise ValueError(
            f"Got {flat_logits.size(0)} logit rows for {len(shortlist.mapped_indices)} remapped targets"
        )
    targets = shortlist.mapped_tensor(device=logits.device)
    losses = F.cross_entropy(flat_logits, targets, reduction="none")
    return _masked_mean(losses, mask)


def output_cross_entropy(
    output: OutputLogits,
    targets: torch.Tensor,
    mask: Optional[torch.Tensor] = None,
) -> LossOutput:
    """Cross entropy for shortlisted or full-vocabulary output logits."""
    if output.shortlist is not None:
        return shortlist_cross_entropy(output.logits, output.shortlist, mask)
    flat_logits = output.logits.reshape(-1, output.logits.size(-1))
    losses = F.cross_entropy(flat_logits, targets.reshape(-1), reduction="none")
    return _masked_mean(losses, mask)


__all__ = ["LossOutput", "output_cross_entropy", "shortlist_cross_entropy"]
