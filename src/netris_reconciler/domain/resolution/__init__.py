"""Name/ID resolution cache backed by the control plane."""

from __future__ import annotations

from .cache import ResolutionCache

__all__ = ["ResolutionCache"]
