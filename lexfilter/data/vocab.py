"""Frequency-ordered vocabulary used on both sides of the lexicon."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from lexfilter.exceptions import ParseError, UnknownSymbolError

PAD, EOS, UNK = "<pad>", "</s>", "<unk>"
SPECIALS = (PAD, EOS, UNK)


@dataclass
class Vocab:
    """Bidirectional token/id mapping.

    Ids are assigned in descending frequency order after the special tokens,
    so ``range(n)`` covers the ``n`` most frequent entries. The shortlist
    builder relies on this ordering when it seeds the shortlist with the
    first ``first_num`` ids.
    """

    itos: List[str]
    stoi: Dict[str, int] = field(default_factory=dict)
    name: str = "vocabulary"

    def __post_init__(self) -> None:
        if not self.stoi:
            self.stoi = {tok: i for i, tok in enumerate(self.itos)}
        if len(self.stoi) != len(self.itos):
            raise ValueError(f"{self.name} contains duplicate tokens")

    @classmethod
    def build(
        cls,
        token_lists: Iterable[List[str]],
        max_size: int = 50000,
        min_freq: int = 1,
        name: str = "vocabulary",
    ) -> "Vocab":
        cnt: Counter = Counter()
        for toks in token_lists:
            cnt.update(toks)
        words = [w for w, f in cnt.most_common() if f >= min_freq and w not in SPECIALS]
        itos = list(SPECIALS) + words[: max(0, max_size - len(SPECIALS))]
        return cls(itos=itos, name=name)

    @classmethod
    def load(cls, path: str, name: Optional[str] = None) -> "Vocab":
        """Read one token per line, optionally followed by a tab and a count."""
        itos: List[str] = []
        with open(path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.rstrip("\n")
                if not line:
                    continue
                token, _, count = line.partition("\t")
                if count:
                    try:
                        int(count)
                    except ValueError as exc:
                        raise ParseError(f"bad token count {count!r}", path=path, line=lineno) from exc
                itos.append(token)
        return cls(itos=itos, name=name or path)

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            for tok in self.itos:
                f.write(tok + "\n")

    def __len__(self) -> int:
        return len(self.itos)

    def __contains__(self, token: str) -> bool:
        return token in self.stoi

    def __getitem__(self, token: str) -> int:
        try:
            return self.stoi[token]
        except KeyError:
            raise UnknownSymbolError(token, side=self.name) from None

    def lookup(self, idx: int) -> str:
        if not 0 <= idx < len(self.itos):
            raise IndexError(f"id {idx} is outside {self.name} of size {len(self.itos)}")
        return self.itos[idx]

    def encode(self, toks: List[str]) -> List[int]:
        unk = self.stoi.get(UNK)
        if unk is None:
            return [self[t] for t in toks]
        return [self.stoi.get(t, unk) for t in toks]

    def decode(self, ids: Iterable[int]) -> List[str]:
        return [self.itos[i] if 0 <= i < len(self.itos) else UNK for i in ids]


__all__ = ["EOS", "PAD", "SPECIALS", "UNK", "Vocab"]
