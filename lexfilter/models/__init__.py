"""Model components for lexfilter."""

from .output import OutputLogits, ShortlistOutput
from .seq2seq import ShortlistModelConfig, ShortlistSeq2Seq, SourceEncoder

__all__ = [
    "OutputLogits",
    "ShortlistModelConfig",
    "ShortlistOutput",
    "ShortlistSeq2Seq",
    "SourceEncoder",
]
