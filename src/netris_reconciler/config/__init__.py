"""Application configuration helpers."""

from __future__ import annotations

from netris_reconciler.common.logging import configure_logging

from .env import require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)
from .http_resilience import RateLimit, ResilienceConfig
from .netris import NetrisConfig, get_netris_config
from .reconcile import ReconcileConfig, get_reconcile_config

__all__ = [
    "ConfigurationError",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "NetrisConfig",
    "RateLimit",
    "ReconcileConfig",
    "ResilienceConfig",
    "configure_logging",
    "get_netris_config",
    "get_reconcile_config",
    "require_env_vars",
]
