"""Data utilities for lexfilter."""

from .batch import ParallelBatch
from .synthetic import SyntheticDatasetConfig, SyntheticParallelDataset
from .vocab import Vocab

__all__ = [
    "ParallelBatch",
    "SyntheticDatasetConfig",
    "SyntheticParallelDataset",
    "Vocab",
]
