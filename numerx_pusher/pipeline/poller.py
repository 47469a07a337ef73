"""
numerx_pusher/pipeline/poller.py

Drives one tracked job to a terminal outcome by polling its status.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from numerx_pusher import failure_codes
from numerx_pusher.connectors.numerx_client import NumerXClient
from numerx_pusher.domain.jobs import FailedJob, Job, StepOutcome
from numerx_pusher.errors import NumerXTransportError, ResponseParseError
from numerx_pusher.logging_utils import log_event
from numerx_pusher.pipeline.step_machine import classify_steps, failed_steps
from numerx_pusher.schemas import parse_status_response

logger = logging.getLogger(__name__)


class Poller:
    """
    Sleep, poll, classify; repeat until the job is terminal.

    Transport errors and unreadable status bodies keep the job pending;
    polling is indefinite until the service gives a definite answer.
    """

    def __init__(
        self,
        *,
        client: NumerXClient,
        poll_interval_seconds: float,
        on_success: Callable[[Job], None],
        on_failure: Callable[[FailedJob], None],
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._poll_interval_seconds = poll_interval_seconds
        self._on_success = on_success
        self._on_failure = on_failure
        self._sleep = sleep

    def run(self, job: Job) -> StepOutcome:
        try:
            return self._track(job)
        except Exception as exc:
            logger.exception("Unhandled poller failure job_id=%s filename=%s error=%s", job.job_id, job.filename, exc)
            self._on_failure(
                FailedJob(
                    job_id=job.job_id,
                    filename=job.filename,
                    cause=failure_codes.UNEXPECTED_ERROR,
                    detail=str(exc),
                )
            )
            return StepOutcome.TERMINAL_FAILURE

    def _track(self, job: Job) -> StepOutcome:
        polls = 0
        while True:
            log_event(logger, logging.DEBUG, "poll_waiting", job_id=job.job_id, wait_seconds=self._poll_interval_seconds)
            self._sleep(self._poll_interval_seconds)
            polls += 1

            outcome = self.poll_once(job)
            if not outcome.is_terminal:
                continue

            log_event(
                logger,
                logging.INFO,
                "job_completed" if outcome is StepOutcome.TERMINAL_SUCCESS else "job_terminal_failure",
                job_id=job.job_id,
                filename=job.filename,
                polls=polls,
            )
            return outcome

    def poll_once(self, job: Job) -> StepOutcome:
        """
        Issue one status request and act on it.

        Emits the success or failure message when the outcome is terminal.
        """

        try:
            result = self._client.fetch_status(job.job_id)
        except NumerXTransportError as exc:
            log_event(logger, logging.WARNING, "status_unreachable", job_id=job.job_id, error=exc.last_error)
            return StepOutcome.PENDING

        if not result.ok:
            log_event(
                logger,
                logging.ERROR,
                "status_rejected",
                job_id=job.job_id,
                filename=job.filename,
                status=result.status_code,
            )
            self._on_failure(
                FailedJob(
                    job_id=job.job_id,
                    filename=job.filename,
                    cause=failure_codes.STATUS_HTTP_ERROR,
                    detail=f"HTTP {result.status_code}",
                )
            )
            return StepOutcome.TERMINAL_FAILURE

        try:
            reports = parse_status_response(result.body)
        except ResponseParseError as exc:
            log_event(logger, logging.WARNING, "status_response_invalid", job_id=job.job_id, error=exc)
            return StepOutcome.PENDING

        outcome = classify_steps(job.kind, reports)
        if outcome is StepOutcome.TERMINAL_SUCCESS:
            self._on_success(job)
        elif outcome is StepOutcome.TERMINAL_FAILURE:
            self._on_failure(
                FailedJob(
                    job_id=job.job_id,
                    filename=job.filename,
                    cause=failure_codes.PIPELINE_STEP_FAILED,
                    detail=",".join(failed_steps(job.kind, reports)),
                )
            )
        else:
            log_event(
                logger,
                logging.DEBUG,
                "job_pending",
                job_id=job.job_id,
                steps=[f"{report.step}={report.status}" for report in reports],
            )
        return outcome
