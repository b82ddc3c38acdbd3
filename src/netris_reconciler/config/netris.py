"""Netris control-plane configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_float_env, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

NETRIS_TIMEOUT_SECONDS = 10.0
NETRIS_AUTH_SCHEME_ID = 1


@dataclass(frozen=True)
class NetrisConfig:
    """Holds Netris API credentials and HTTP settings."""

    address: str
    login: str
    password: str
    resilience: ResilienceConfig
    auth_scheme_id: int = NETRIS_AUTH_SCHEME_ID


def get_netris_config(*, resilience: ResilienceConfig | None = None) -> NetrisConfig:
    values = require_env_vars(("NETRIS_ADDRESS", "NETRIS_LOGIN", "NETRIS_PASSWORD"))
    address = values["NETRIS_ADDRESS"].rstrip("/")
    timeout = optional_float_env("NETRIS_TIMEOUT_SECONDS", NETRIS_TIMEOUT_SECONDS)
    return NetrisConfig(
        address=address,
        login=values["NETRIS_LOGIN"],
        password=values["NETRIS_PASSWORD"],
        resilience=resilience
        or ResilienceConfig(
            name="netris",
            base_url=address,
            timeout_seconds=timeout,
            ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
            default_headers={"Content-Type": "application/json"},
        ),
    )
