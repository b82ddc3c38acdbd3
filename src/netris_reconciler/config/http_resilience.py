"""Configuration types for rate-limited HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Per-service HTTP settings.

    Every request carries ``timeout_seconds``. There is no retry
    policy: a failed call fails the current reconcile, which is re-run after the
    poll interval.
    """

    name: str
    base_url: str | None = None
    timeout_seconds: float = 10.0
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None
