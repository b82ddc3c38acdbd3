"""Domain port definitions for adapters."""

from __future__ import annotations

from .remote import ApiReply, RemoteClient
from .store import ObjectStore

__all__ = [
    "ApiReply",
    "ObjectStore",
    "RemoteClient",
]
