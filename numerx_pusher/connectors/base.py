"""
numerx_pusher/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from numerx_pusher.config import PusherSettings
from numerx_pusher.errors import NumerXTransportError
from numerx_pusher.logging_utils import log_event

logger = logging.getLogger(__name__)

# A body cut off mid-transfer is a dropped connection, not a bad request.
TRANSPORT_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


@dataclass(frozen=True)
class HTTPResult:
    """
    Status code and raw body of a request that reached the service.
    """

    status_code: int
    body: bytes
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def body_text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class BaseConnector:
    """
    Shared session, timeout and transport-level retry for service calls.

    The session is safe to share across worker threads; connections are
    pooled per host.
    """

    def __init__(
        self,
        *,
        settings: PusherSettings,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._session = session or self._build_session(pool_size=settings.concurrency)
        self._owns_session = session is None
        self._timeout_seconds = settings.http_timeout_seconds
        self._max_attempts = max(1, settings.retry_count)
        self._retry_wait_seconds = settings.poll_interval_seconds
        self._backoff_multiplier = settings.retry_backoff_multiplier
        self._sleep = sleep

    @staticmethod
    def _build_session(*, pool_size: int) -> requests.Session:
        """
        Pool sized for the submitter slots.

        Pollers are not bounded, so with more in-flight jobs than pooled
        connections urllib3 opens extra connections and discards them after
        use ("Connection pool is full" warnings). Requests still succeed;
        only keep-alive reuse is lost for the overflow.
        """

        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=4, pool_maxsize=max(10, pool_size))
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def _send(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        data: bytes | None = None,
    ) -> HTTPResult:
        """
        Execute one HTTP request; transport failures raise NumerXTransportError.
        """

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                data=data,
                timeout=self._timeout_seconds,
            )
        except TRANSPORT_ERRORS as exc:
            raise NumerXTransportError(url, 1, exc) from exc
        except requests.RequestException as exc:
            raise NumerXTransportError(url, 1, exc, retryable=False) from exc

        log_event(
            logger,
            logging.DEBUG,
            "http_response",
            method=method,
            url=url,
            status=response.status_code,
            body=response.text,
        )
        return HTTPResult(status_code=response.status_code, body=response.content)

    def _send_with_retry(
        self,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        data: bytes | None = None,
    ) -> HTTPResult:
        """
        Execute an HTTP request, retrying transport failures only.

        HTTP status codes are returned to the caller as-is and never retried
        here. The wait between attempts starts at the poll interval and is
        multiplied by the backoff multiplier after each failure.
        """

        last_error: Exception | None = None
        for attempt in range(self._max_attempts):
            try:
                result = self._send(method=method, url=url, params=params, headers=headers, data=data)
                return HTTPResult(status_code=result.status_code, body=result.body, attempts=attempt + 1)
            except NumerXTransportError as exc:
                if not exc.retryable:
                    log_event(
                        logger, logging.ERROR, "http_request_failed", method=method, url=url, error=exc.last_error
                    )
                    raise NumerXTransportError(url, attempt + 1, exc.last_error, retryable=False) from exc
                last_error = exc.last_error

            if attempt + 1 >= self._max_attempts:
                break

            wait_seconds = self._retry_wait_seconds * (self._backoff_multiplier**attempt)
            log_event(
                logger,
                logging.WARNING,
                "http_request_retry",
                method=method,
                url=url,
                attempt=attempt + 1,
                max_attempts=self._max_attempts,
                wait_seconds=round(wait_seconds, 2),
                error=last_error,
            )
            self._sleep(wait_seconds)

        log_event(
            logger,
            logging.ERROR,
            "http_request_exhausted",
            method=method,
            url=url,
            attempts=self._max_attempts,
            error=last_error,
        )
        raise NumerXTransportError(url, self._max_attempts, last_error)
