"""Train the toy translation model on synthetic data with a lexical shortlist."""
from __future__ import annotations

import argparse
import logging

import torch

from lexfilter.config import FilterOptions, ShortlistConfig
from lexfilter.data import SyntheticDatasetConfig, SyntheticParallelDataset, Vocab
from lexfilter.lexicon import LexiconTable
from lexfilter.models import ShortlistModelConfig, ShortlistSeq2Seq
from lexfilter.shortlist import ShortlistBuilder
from lexfilter.training import decode_greedy, train_epoch
from lexfilter.utils import ProgressLogger, target_coverage


def build_table(args: argparse.Namespace, dataset: SyntheticParallelDataset) -> tuple[LexiconTable, ShortlistConfig]:
    if args.filter:
        options = FilterOptions.from_strings(args.filter)
        src_vocab = Vocab.load(args.src_vocab, name="source")
        trg_vocab = Vocab.load(args.trg_vocab, name="target")
        return options.create_table(src_vocab, trg_vocab), options.shortlist
    config = ShortlistConfig(first_num=args.first_num, best_num=args.best_num, threshold=args.threshold)
    return LexiconTable.from_entries(dataset.lexicon_entries(), config), config


def train(args: argparse.Namespace) -> None:
    device = torch.device("cuda" if torch.cuda.is_available() else "cpu")
    dataset = SyntheticParallelDataset(
        SyntheticDatasetConfig(
            src_vocab_size=args.src_vocab_size,
            trg_vocab_size=args.trg_vocab_size,
            seq_len=args.seq_len,
            batch_size=args.batch_size,
            num_batches=args.steps,
        )
    )
    table, config = build_table(args, dataset)
    print(f"lexicon: {table.stats()}")
    builder = None if args.no_shortlist else ShortlistBuilder(table, config, args.trg_vocab_size)

    model = ShortlistSeq2Seq(
        ShortlistModelConfig(
            src_vocab_size=args.src_vocab_size,
            trg_vocab_size=args.trg_vocab_size,
            hidden_size=args.hidden,
            max_len=args.seq_len,
        )
    ).to(device)
    optimizer = torch.optim.Adam(model.parameters(), lr=args.lr)
    logger = ProgressLogger(log_every=args.log_every)

    for epoch in range(1, args.epochs + 1):
        metrics = train_epoch(model, optimizer, dataset, builder, device, logger)
        print(f"epoch={epoch} " + " ".join(f"{k}={v:.4f}" for k, v in sorted(metrics.items())))

    batch = next(iter(dataset)).to(device)
    predicted = decode_greedy(model, batch, builder)
    mask = batch.target_mask
    accuracy = (predicted[mask] == batch.target[mask]).float().mean().item()
    print(f"greedy accuracy={accuracy:.4f}")
    if builder is not None:
        coverage = target_coverage(builder.build(batch.source_ids(), []), batch.target[mask].tolist())
        print(f"reference coverage={coverage:.4f}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train a toy translation model with a lexical shortlist")
    parser.add_argument("--filter", nargs="+", metavar="ARG", help="lexicon path [first_num [best_num [threshold]]]")
    parser.add_argument("--src-vocab", help="source vocabulary file, required with --filter")
    parser.add_argument("--trg-vocab", help="target vocabulary file, required with --filter")
    parser.add_argument("--first-num", type=int, default=10)
    parser.add_argument("--best-num", type=int, default=10)
    parser.add_argument("--threshold", type=float, default=0.0)
    parser.add_argument("--no-shortlist", action="store_true", help="score the full target vocabulary")
    parser.add_argument("--src-vocab-size", type=int, default=64)
    parser.add_argument("--trg-vocab-size", type=int, default=256)
    parser.add_argument("--seq-len", type=int, default=8)
    parser.add_argument("--hidden", type=int, default=32)
    parser.add_argument("--batch-size", type=int, default=8)
    parser.add_argument("--steps", type=int, default=50)
    parser.add_argument("--epochs", type=int, default=3)
    parser.add_argument("--lr", type=float, default=1e-3)
    parser.add_argument("--log-every", type=int, default=10)
    args = parser.parse_args()
    if args.filter and (args.src_vocab is None or args.trg_vocab is None):
        parser.error("--filter requires --src-vocab and --trg-vocab")
    return args


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    train(parse_args())
