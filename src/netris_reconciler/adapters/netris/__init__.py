"""Netris control-plane adapter."""

from __future__ import annotations

from .client import ENDPOINTS, NetrisAPIError, NetrisClient

__all__ = ["ENDPOINTS", "NetrisAPIError", "NetrisClient"]
