"""Training helpers."""

from .loop import decode_greedy, train_epoch

__all__ = ["decode_greedy", "train_epoch"]
