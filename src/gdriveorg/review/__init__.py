"""Review state exports for gdriveorg."""

from __future__ import annotations

from .session import UNCLASSIFIED, ReviewSession

__all__ = ["ReviewSession", "UNCLASSIFIED"]
