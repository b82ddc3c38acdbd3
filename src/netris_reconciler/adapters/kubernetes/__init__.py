"""Kubernetes custom-resource adapter for the object store port."""

from __future__ import annotations

from .store import KubernetesObjectStore, load_custom_objects_api

__all__ = ["KubernetesObjectStore", "load_custom_objects_api"]
