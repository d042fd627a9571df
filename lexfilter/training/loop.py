"""Training loop with per-batch vocabulary shortlists."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

import torch

from lexfilter.data import ParallelBatch
from lexfilter.models import ShortlistSeq2Seq
from lexfilter.objectives import output_cross_entropy
from lexfilter.shortlist import ShortlistBuilder
from lexfilter.utils import ProgressLogger, shortlist_ratio


def train_epoch(
    model: ShortlistSeq2Seq,
    optimizer: torch.optim.Optimizer,
    dataset: Iterable[ParallelBatch],
    builder: Optional[ShortlistBuilder],
    device: torch.device,
    logger: ProgressLogger,
    max_grad_norm: float = 1.0,
) -> Dict[str, float]:
    """Run one epoch; without a builder the full vocabulary is scored."""
    model.train()
    total_loss = 0.0
    total_batches = 0
    aggregates = {
        "shortlist_size": 0.0,
        "shortlist_ratio": 0.0,
        "tokens": 0.0,
    }

    for step, batch in enumerate(dataset, start=1):
        batch = batch.to(device)
        shortlist = builder.build_batch(batch) if builder is not None else None
        optimizer.zero_grad(set_to_none=True)
        output = model(batch.source, batch.source_mask, shortlist=shortlist)
        result = output_cross_entropy(output, batch.target, batch.target_mask)
        result.loss.backward()
        torch.nn.utils.clip_grad_norm_(model.parameters(), max_norm=max_grad_norm)
        optimizer.step()

        vocab_size = model.config.trg_vocab_size
        size = len(shortlist) if shortlist is not None else vocab_size
        total_loss += result.loss.item()
        total_batches += 1
        aggregates["shortlist_size"] += size
        aggregates["shortlist_ratio"] += shortlist_ratio(shortlist, vocab_size) if shortlist is not None else 1.0
        aggregates["tokens"] += result.num_tokens

        logger.log(step, "train", {
            "loss": result.loss.item(),
            "shortlist": size,
        })

    if total_batches == 0:
        return {key: 0.0 for key in ["loss", *aggregates.keys()]}

    metrics = {key: value / total_batches for key, value in aggregates.items()}
    metrics["loss"] = total_loss / total_batches
    return metrics


@torch.no_grad()
def decode_greedy(
    model: ShortlistSeq2Seq,
    batch: ParallelBatch,
    builder: Optional[ShortlistBuilder] = None,
) -> torch.Tensor:
    """Argmax prediction per position, returned as vocabulary ids.

    At decoding time there is no ground truth, so the shortlist is built from
    the source side only.
    """
    model.eval()
    shortlist = builder.build(batch.source_ids(), []) if builder is not None else None
    output = model(batch.source, batch.source_mask, shortlist=shortlist)
    positions = output.logits.argmax(dim=-1)
    if shortlist is None:
        return positions
    return shortlist.restore(positions)


__all__ = ["decode_greedy", "train_epoch"]
