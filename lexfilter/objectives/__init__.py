"""Objective exports."""
from .losses import LossOutput, output_cross_entropy, shortlist_cross_entropy

__all__ = [
    "LossOutput",
    "output_cross_entropy",
    "shortlist_cross_entropy",
]
