"""Lightweight progress logger."""

from __future__ import annotations

import dataclasses
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO


@dataclasses.dataclass
class ProgressLogger:
    log_every: int = 10
    stream: Optional[TextIO] = dataclasses.field(default=None, repr=False)

    def log(self, step: int, message: str, extra: Dict[str, Any] | None = None) -> None:
        if step % self.log_every != 0:
            return
        now = datetime.now(timezone.utc).isoformat()
        payload = {"time": now, "step": step, "message": message}
        if extra:
            payload.update(extra)
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(str(payload) + "\n")
        stream.flush()


__all__ = ["ProgressLogger"]
