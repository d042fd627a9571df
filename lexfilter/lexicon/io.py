"""Reading lexical translation tables from disk."""

from __future__ import annotations

import gzip
from typing import IO, Iterator, NamedTuple

from lexfilter.exceptions import ParseError


class LexiconLine(NamedTuple):
    lineno: int
    target: str
    source: str
    prob: float


def open_text(path: str) -> IO[str]:
    if path.endswith(".gz"):
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, "r", encoding="utf-8")


def read_lexicon(path: str) -> Iterator[LexiconLine]:
    """Yield ``target source probability`` triples from a lexicon file.

    Blank lines are ignored. Anything else that is not exactly three fields
    with a probability in ``[0, 1]`` raises :class:`ParseError`.
    """
    with open_text(path) as f:
        for lineno, line in enumerate(f, start=1):
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 3:
                raise ParseError(f"expected 3 fields, got {len(fields)}", path=path, line=lineno)
            target, source, literal = fields
            try:
                prob = float(literal)
            except ValueError as exc:
                raise ParseError(f"bad probability {literal!r}", path=path, line=lineno) from exc
            # also rejects nan
            if not 0.0 <= prob <= 1.0:
                raise ParseError(f"probability {literal} is outside [0, 1]", path=path, line=lineno)
            yield LexiconLine(lineno, target, source, prob)


__all__ = ["LexiconLine", "open_text", "read_lexicon"]
