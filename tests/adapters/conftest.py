"""Shared fixtures for HTTP adapter tests."""

from __future__ import annotations

import pytest

from suitesync.config import AccountConfig, ResilienceConfig, RetryPolicy


@pytest.fixture
def account_config() -> AccountConfig:
    return AccountConfig(
        account_id="TSTDRV123",
        api_token="token",
        resilience=ResilienceConfig(
            name="suitesync-test",
            base_url="https://tstdrv123.app.netsuite.com",
            retry=RetryPolicy(total=0),
            cache=None,
            default_headers={"Authorization": "Bearer token"},
        ),
    )
