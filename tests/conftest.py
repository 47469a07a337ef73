from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from fakes import BASE_URL
from numerx_pusher.config import PusherSettings


@pytest.fixture()
def settings() -> PusherSettings:
    """Settings with a zero poll interval so retries and polls never wait."""
    return PusherSettings(
        authorization="EAP apikey:00000000-1234-5678-0000-000000000000",
        base_url=BASE_URL,
        concurrency=5,
        poll_interval_minutes=0.0,
        retry_count=3,
    )


@pytest.fixture()
def make_csv(tmp_path: Path) -> Callable[..., str]:
    def _make(name: str, content: str = "event_date,device_id\n2016-05-01,42\n") -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _make


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real NUMERX_* variables and .env files out of the tests."""
    for name in (
        "NUMERX_AUTHORIZATION",
        "NUMERX_BASE_URL",
        "NUMERX_CONCURRENCY",
        "NUMERX_POLL_INTERVAL_MINUTES",
        "NUMERX_RETRY_COUNT",
        "NUMERX_HTTP_TIMEOUT_SECONDS",
        "NUMERX_RETRY_BACKOFF_MULTIPLIER",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
