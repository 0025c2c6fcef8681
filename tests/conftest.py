from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolated_account_env(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path_factory: pytest.TempPathFactory,
) -> None:
    for name in (
        "SUITESYNC_ACCOUNT_ID",
        "SUITESYNC_API_TOKEN",
        "SUITESYNC_BASE_URL",
        "SUITESYNC_HTTP_CACHE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SUITESYNC_DATA_DIR", str(tmp_path_factory.mktemp("suitesync-data")))
