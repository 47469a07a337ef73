"""
numerx_pusher/pipeline/submitter.py

Turns one CSV file into either a tracked job or a failed job.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from numerx_pusher import failure_codes
from numerx_pusher.connectors.numerx_client import NumerXClient
from numerx_pusher.domain.jobs import FailedJob, Job
from numerx_pusher.domain.request_kind import RequestKind
from numerx_pusher.errors import NumerXTransportError, ResponseParseError
from numerx_pusher.logging_utils import log_event
from numerx_pusher.schemas import parse_submit_response

logger = logging.getLogger(__name__)

PARSE_ERROR_TAG = "parse error"
_BODY_EXCERPT_CHARS = 200


class Submitter:
    """
    Posts files to the service and routes each outcome to exactly one sink.
    """

    def __init__(
        self,
        *,
        client: NumerXClient,
        kind: RequestKind,
        on_job: Callable[[Job], None],
        on_failure: Callable[[FailedJob], None],
    ) -> None:
        self._client = client
        self._kind = kind
        self._on_job = on_job
        self._on_failure = on_failure

    def submit(self, filename: str) -> Job | FailedJob:
        """
        Submit one file and emit the resulting job or failure.
        """

        try:
            outcome = self._submit(filename)
        except Exception as exc:
            logger.exception("Unhandled submit failure filename=%s error=%s", filename, exc)
            outcome = FailedJob(
                job_id="",
                filename=filename,
                cause=failure_codes.UNEXPECTED_ERROR,
                detail=str(exc),
            )

        if isinstance(outcome, Job):
            self._on_job(outcome)
        else:
            self._on_failure(outcome)
        return outcome

    def _submit(self, filename: str) -> Job | FailedJob:
        try:
            body = Path(filename).read_bytes()
        except OSError as exc:
            log_event(logger, logging.ERROR, "submit_file_unreadable", filename=filename, error=exc)
            return FailedJob(
                job_id=str(exc),
                filename=filename,
                cause=failure_codes.FILE_READ_ERROR,
                detail=str(exc),
            )

        try:
            result = self._client.submit_csv(body, self._kind, filename=filename)
        except NumerXTransportError as exc:
            failed_at = datetime.now(timezone.utc).isoformat()
            return FailedJob(
                job_id=f"{failed_at}:{exc.last_error}",
                filename=filename,
                cause=failure_codes.SUBMIT_TRANSPORT_ERROR,
                detail=str(exc),
            )

        if not result.ok:
            log_event(
                logger,
                logging.ERROR,
                "submit_rejected",
                filename=filename,
                status=result.status_code,
                body=result.body_text()[:_BODY_EXCERPT_CHARS],
            )
            return FailedJob(
                job_id="",
                filename=filename,
                cause=failure_codes.SUBMIT_HTTP_ERROR,
                detail=f"HTTP {result.status_code}",
            )

        try:
            job_id = parse_submit_response(result.body)
        except ResponseParseError as exc:
            log_event(logger, logging.ERROR, "submit_response_invalid", filename=filename, error=exc)
            return FailedJob(
                job_id=PARSE_ERROR_TAG,
                filename=filename,
                cause=failure_codes.SUBMIT_PARSE_ERROR,
                detail=str(exc),
            )

        log_event(
            logger,
            logging.INFO,
            "submit_accepted",
            filename=filename,
            job_id=job_id,
            attempts=result.attempts,
        )
        return Job(job_id=job_id, filename=filename, kind=self._kind)
