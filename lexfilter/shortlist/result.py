"""Per-batch shortlist handed to the output layer, the loss and decoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Tuple

import torch

from lexfilter.exceptions import PositionNotFoundError


@dataclass(frozen=True)
class ShortlistResult:
    """Reduced vocabulary of one minibatch.

    Attributes:
        indices: Selected vocabulary ids, strictly ascending. Position ``i``
            of the reduced output layer corresponds to ``indices[i]``.
        mapped_indices: Shortlist position of every ground-truth target id,
            parallel to the target sequence the shortlist was built from.
        reverse: Position to vocabulary id, for the positions that appear in
            ``mapped_indices``.
        positions: Vocabulary id to position, for every shortlisted id.
    """

    indices: Tuple[int, ...]
    mapped_indices: Tuple[int, ...]
    reverse: Mapping[int, int] = field(repr=False, compare=False)
    positions: Mapping[int, int] = field(repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.indices)

    def __contains__(self, token_id: int) -> bool:
        return token_id in self.positions

    def reverse_map(self, position: int) -> int:
        try:
            return self.reverse[position]
        except KeyError:
            raise PositionNotFoundError(position) from None

    def position_of(self, token_id: int) -> int:
        try:
            return self.positions[token_id]
        except KeyError:
            raise KeyError(f"Token id {token_id} is not in the shortlist") from None

    def indices_tensor(self, device: Optional[torch.device | str] = None) -> torch.Tensor:
        return torch.tensor(self.indices, dtype=torch.long, device=device)

    def mapped_tensor(
        self,
        device: Optional[torch.device | str] = None,
        shape: Optional[Sequence[int]] = None,
    ) -> torch.Tensor:
        mapped = torch.tensor(self.mapped_indices, dtype=torch.long, device=device)
        if shape is not None:
            mapped = mapped.view(*shape)
        return mapped

    def restore(self, positions: torch.Tensor) -> torch.Tensor:
        """Map shortlist positions of any shape back to vocabulary ids."""
        if positions.numel() > 0:
            low, high = int(positions.min()), int(positions.max())
            if low < 0 or high >= len(self.indices):
                raise IndexError(f"Shortlist positions must lie in [0, {len(self.indices)}), got [{low}, {high}]")
        lookup = self.indices_tensor(device=positions.device)
        return lookup[positions.long()]


__all__ = ["ShortlistResult"]
