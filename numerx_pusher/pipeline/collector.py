"""
numerx_pusher/pipeline/collector.py

Single consumer that accumulates job outcomes delivered by worker threads.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Union

from numerx_pusher.domain.jobs import FailedJob, Job
from numerx_pusher.logging_utils import log_event
from numerx_pusher.pipeline.messages import END_OF_STREAM, EndOfStream

logger = logging.getLogger(__name__)


_Message = Union[FailedJob, Job, EndOfStream]


class FailureCollector:
    """
    Drains failure (and success) messages until closed.

    Only the collector thread mutates the failure list; workers deliver by
    message. ``failures`` is read after ``join()``.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[_Message] = queue.Queue()
        self._failures: list[FailedJob] = []
        self._succeeded = 0
        self._closed = False
        self._thread = threading.Thread(target=self._drain, name="failure-collector", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def report_failure(self, failed_job: FailedJob) -> None:
        if self._closed:
            raise RuntimeError("Failure collector is already closed.")
        self._queue.put(failed_job)

    def report_success(self, job: Job) -> None:
        if self._closed:
            raise RuntimeError("Failure collector is already closed.")
        self._queue.put(job)

    def close(self) -> None:
        self._closed = True
        self._queue.put(END_OF_STREAM)

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    @property
    def failures(self) -> list[FailedJob]:
        return list(self._failures)

    @property
    def succeeded(self) -> int:
        return self._succeeded

    def _drain(self) -> None:
        while True:
            message = self._queue.get()
            if message is END_OF_STREAM:
                log_event(logger, logging.DEBUG, "failure_collector_closed", failures=len(self._failures))
                return
            if isinstance(message, FailedJob):
                self._failures.append(message)
                log_event(
                    logger,
                    logging.WARNING,
                    "job_failed",
                    job_id=message.job_id,
                    filename=message.filename,
                    cause=message.cause,
                    detail=message.detail,
                )
            else:
                self._succeeded += 1
