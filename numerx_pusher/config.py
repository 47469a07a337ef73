"""
numerx_pusher/config.py

Pusher configuration: one immutable settings record built at startup.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from numerx_pusher.domain.request_kind import RequestKind
from numerx_pusher.errors import ConfigurationError

DEFAULT_CONCURRENCY = 20
DEFAULT_POLL_INTERVAL_MINUTES = 1.0
DEFAULT_RETRY_COUNT = 3
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRY_BACKOFF_MULTIPLIER = 1.0

T = TypeVar("T")


def _read_env_file(env_path: Path) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        key, sep, value = raw_line.strip().partition("=")
        if key.startswith("#") or not sep:
            continue
        key = key.strip()
        if key:
            pairs[key] = value.strip().strip("\"'")
    return pairs


def load_env_files(directory: Path | None = None) -> None:
    """
    Copy KEY=VALUE pairs from `.env`, then `.env.local`, into the process
    environment. Variables that are already set keep their value.
    """

    root = directory or Path.cwd()
    for env_path in (root / ".env", root / ".env.local"):
        if env_path.is_file():
            for key, value in _read_env_file(env_path).items():
                os.environ.setdefault(key, value)


def _env(name: str, default: T, parse: Callable[[str], T]) -> T:
    """
    Parsed value of ``name``; blank or unparsable values give ``default``.
    """

    raw_value = (os.getenv(name) or "").strip()
    if not raw_value:
        return default
    try:
        return parse(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class PusherSettings:
    """
    Runtime settings shared by the client and every pipeline component.
    """

    authorization: str
    base_url: str
    kind: RequestKind = RequestKind.VIEWERSHIP
    concurrency: int = DEFAULT_CONCURRENCY
    poll_interval_minutes: float = DEFAULT_POLL_INTERVAL_MINUTES
    retry_count: int = DEFAULT_RETRY_COUNT
    verbose: bool = False
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    retry_backoff_multiplier: float = DEFAULT_RETRY_BACKOFF_MULTIPLIER

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_minutes * 60.0


def load_settings(
    *,
    authorization: str | None = None,
    base_url: str | None = None,
    kind_token: str | None = None,
    concurrency: int | None = None,
    poll_interval_minutes: float | None = None,
    retry_count: int | None = None,
    verbose: bool = False,
    http_timeout_seconds: float | None = None,
) -> PusherSettings:
    """
    Merge explicit values over environment values and validate the result.

    Raises ConfigurationError listing every problem found, so the operator
    can fix all of them in one go. An unknown kind token raises
    UnknownRequestKindError before anything else is checked.
    """

    load_env_files()

    kind = RequestKind.from_token(kind_token) if kind_token is not None else RequestKind.VIEWERSHIP

    resolved_authorization = (authorization or "").strip() or _env("NUMERX_AUTHORIZATION", "", str)
    resolved_base_url = ((base_url or "").strip() or _env("NUMERX_BASE_URL", "", str)).rstrip("/")
    resolved_concurrency = (
        concurrency if concurrency is not None else _env("NUMERX_CONCURRENCY", DEFAULT_CONCURRENCY, int)
    )
    resolved_interval = (
        poll_interval_minutes
        if poll_interval_minutes is not None
        else _env("NUMERX_POLL_INTERVAL_MINUTES", DEFAULT_POLL_INTERVAL_MINUTES, float)
    )
    resolved_retries = (
        retry_count if retry_count is not None else _env("NUMERX_RETRY_COUNT", DEFAULT_RETRY_COUNT, int)
    )
    resolved_timeout = (
        http_timeout_seconds
        if http_timeout_seconds is not None
        else _env("NUMERX_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS, float)
    )
    backoff_multiplier = _env("NUMERX_RETRY_BACKOFF_MULTIPLIER", DEFAULT_RETRY_BACKOFF_MULTIPLIER, float)

    problems: list[str] = []
    if not resolved_authorization:
        problems.append("Authorization key is not set. Pass -a or set NUMERX_AUTHORIZATION.")
    if not resolved_base_url:
        problems.append("Base URL is not set. Pass -b or set NUMERX_BASE_URL.")
    elif not resolved_base_url.startswith(("http://", "https://")):
        problems.append(f"Base URL '{resolved_base_url}' must start with http:// or https://.")
    if resolved_concurrency < 1:
        problems.append(f"Concurrency must be at least 1, got {resolved_concurrency}.")
    if resolved_retries < 1:
        problems.append(f"Retry count must be at least 1, got {resolved_retries}.")
    if resolved_interval < 0:
        problems.append(f"Sleep time must not be negative, got {resolved_interval}.")
    if resolved_timeout <= 0:
        problems.append(f"HTTP timeout must be positive, got {resolved_timeout}.")

    if problems:
        raise ConfigurationError(problems)

    return PusherSettings(
        authorization=resolved_authorization,
        base_url=resolved_base_url,
        kind=kind,
        concurrency=resolved_concurrency,
        poll_interval_minutes=resolved_interval,
        retry_count=resolved_retries,
        verbose=verbose,
        http_timeout_seconds=resolved_timeout,
        retry_backoff_multiplier=max(1.0, backoff_multiplier),
    )
