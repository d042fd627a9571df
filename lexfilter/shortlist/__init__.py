"""Per-batch target vocabulary shortlists."""

from .builder import ShortlistBuilder, build_shortlist
from .result import ShortlistResult

__all__ = ["ShortlistBuilder", "ShortlistResult", "build_shortlist"]
