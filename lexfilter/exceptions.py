"""Exception hierarchy for lexfilter.

All errors derive from :class:`LexFilterError`. Each concrete error also
inherits from the closest builtin so that callers catching ``ValueError`` or
``KeyError`` keep working.
"""

from __future__ import annotations

from typing import Optional


class LexFilterError(Exception):
    """Base exception for all lexfilter errors."""


class ConfigError(LexFilterError, ValueError):
    """Filter configuration is missing or out of range.

    Raised while constructing the filter, before any batch is processed.
    """


class ParseError(LexFilterError, ValueError):
    """A numeric literal could not be parsed.

    Used both for the filter option list and for the probability column of a
    lexicon file. ``path`` and ``line`` are set when the literal came from a
    file.
    """

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None) -> None:
        self.path = path
        self.line = line
        if path is not None:
            location = path if line is None else f"{path}:{line}"
            message = f"{location}: {message}"
        super().__init__(message)


class UnknownSymbolError(LexFilterError, KeyError):
    """The lexicon references a symbol the vocabulary does not contain."""

    def __init__(self, symbol: str, side: str = "vocabulary") -> None:
        self.symbol = symbol
        self.side = side
        super().__init__(f"Unknown {side} symbol: {symbol!r}")

    def __str__(self) -> str:
        return str(self.args[0])


class PositionNotFoundError(LexFilterError, KeyError):
    """Reverse lookup of a shortlist position that no target id was mapped to."""

    def __init__(self, position: int) -> None:
        self.position = position
        super().__init__(f"No target id was remapped to shortlist position {position}")

    def __str__(self) -> str:
        return str(self.args[0])


__all__ = [
    "LexFilterError",
    "ConfigError",
    "ParseError",
    "UnknownSymbolError",
    "PositionNotFoundError",
]
