"""
numerx_pusher/connectors/numerx_client.py

NumerX data service client: CSV submission and job status lookup.
"""

from __future__ import annotations

import logging

from numerx_pusher.connectors.base import BaseConnector, HTTPResult
from numerx_pusher.domain.request_kind import RequestKind
from numerx_pusher.logging_utils import log_event

logger = logging.getLogger(__name__)

STATUS_PATH = "/status"


class NumerXClient(BaseConnector):
    """
    Client for the NumerX submit and status endpoints.
    """

    def submit_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "text/csv",
            "Authorization": self._settings.authorization,
        }

    def status_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": self._settings.authorization,
        }

    def submit_url(self, kind: RequestKind) -> str:
        return f"{self._settings.base_url}{kind.path}"

    def status_url(self) -> str:
        return f"{self._settings.base_url}{STATUS_PATH}"

    def submit_csv(self, body: bytes, kind: RequestKind | None = None, *, filename: str = "") -> HTTPResult:
        """
        POST CSV bytes verbatim, retrying transport failures.

        Raises:
            NumerXTransportError: If every attempt failed at transport level,
                or the request failed in a way a retry cannot fix.
        """

        kind = kind or self._settings.kind
        url = self.submit_url(kind)
        log_event(
            logger,
            logging.DEBUG,
            "submit_request",
            url=url,
            params=kind.submit_params(),
            filename=filename,
            size_bytes=len(body),
        )
        return self._send_with_retry(
            method="POST",
            url=url,
            params=kind.submit_params(),
            headers=self.submit_headers(),
            data=body,
        )

    def fetch_status(self, job_id: str) -> HTTPResult:
        """
        GET the step list for one job; a single attempt.

        Raises:
            NumerXTransportError: If the service could not be reached.
        """

        return self._send(
            method="GET",
            url=self.status_url(),
            params={"id": job_id},
            headers=self.status_headers(),
        )
