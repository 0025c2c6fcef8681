"""Account connection configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

ACCOUNT_URL_TEMPLATE = "https://{account}.app.netsuite.com"
DEFAULT_TIMEOUT_SECONDS = 600.0


def to_url_account_id(account_id: str) -> str:
    """Return the host-safe form of an account id (``TSTDRV_SB1`` -> ``tstdrv-sb1``)."""

    return account_id.strip().lower().replace("_", "-")


@dataclass(frozen=True, slots=True)
class AccountConfig:
    """Credentials and transport settings for one remote account."""

    account_id: str
    api_token: str
    resilience: ResilienceConfig

    @property
    def url(self) -> str:
        return ACCOUNT_URL_TEMPLATE.format(account=to_url_account_id(self.account_id))


def get_account_config(*, resilience: ResilienceConfig | None = None) -> AccountConfig:
    values = require_env_vars(("SUITESYNC_ACCOUNT_ID", "SUITESYNC_API_TOKEN"))
    account_id = values["SUITESYNC_ACCOUNT_ID"]
    api_token = values["SUITESYNC_API_TOKEN"]
    base_url = os.getenv("SUITESYNC_BASE_URL") or ACCOUNT_URL_TEMPLATE.format(
        account=to_url_account_id(account_id)
    )

    return AccountConfig(
        account_id=account_id,
        api_token=api_token,
        resilience=resilience
        or ResilienceConfig(
            name="suitesync",
            base_url=base_url,
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            retry=RetryPolicy(total=3),
            cache=get_cache_config(),
            default_headers={"Authorization": f"Bearer {api_token}"},
        ),
    )


def get_cache_config() -> CacheConfig | None:
    """Read ``SUITESYNC_HTTP_CACHE``: ``memory`` (default), ``sqlite`` or ``off``."""

    mode = (os.getenv("SUITESYNC_HTTP_CACHE") or "memory").strip().lower()
    if mode == "off":
        return None
    if mode == "memory":
        return CacheConfig(backend="memory")
    if mode == "sqlite":
        return CacheConfig(backend="sqlite")
    raise ConfigurationError(f"Unsupported SUITESYNC_HTTP_CACHE value: {mode!r}")
