"""Lexical target-vocabulary shortlists for sequence-to-sequence models."""
from . import data, lexicon, models, objectives, shortlist, training, utils
from .config import FilterOptions, ShortlistConfig
from .exceptions import (
    ConfigError,
    LexFilterError,
    ParseError,
    PositionNotFoundError,
    UnknownSymbolError,
)
from .lexicon import LexiconTable
from .shortlist import ShortlistBuilder, ShortlistResult

__all__ = [
    "ConfigError",
    "FilterOptions",
    "LexFilterError",
    "LexiconTable",
    "ParseError",
    "PositionNotFoundError",
    "ShortlistBuilder",
    "ShortlistConfig",
    "ShortlistResult",
    "UnknownSymbolError",
    "data",
    "lexicon",
    "models",
    "objectives",
    "shortlist",
    "training",
    "utils",
]
