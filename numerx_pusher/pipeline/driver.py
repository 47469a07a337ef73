"""
numerx_pusher/pipeline/driver.py

Lifecycle of one upload run.

Ordering
--------
1. start the failure collector and the tracker dispatcher
2. submit files through at most ``concurrency`` submitter threads
3. wait for every submitter to finish
4. close the tracker and wait for every poller to finish
5. close the collector and wait for it to drain

Closing the tracker before all submitters finish can drop jobs; closing
the collector before all pollers finish can drop failure reports.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence

from numerx_pusher.config import PusherSettings
from numerx_pusher.connectors.numerx_client import NumerXClient
from numerx_pusher.domain.jobs import PipelineResult
from numerx_pusher.logging_utils import log_event
from numerx_pusher.pipeline.collector import FailureCollector
from numerx_pusher.pipeline.poller import Poller
from numerx_pusher.pipeline.submitter import Submitter
from numerx_pusher.pipeline.tracker import TrackerDispatcher

logger = logging.getLogger(__name__)


class PusherPipeline:
    """
    Uploads files concurrently and tracks each accepted job to completion.
    """

    def __init__(
        self,
        *,
        settings: PusherSettings,
        client: NumerXClient | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._client = client or NumerXClient(settings=settings, sleep=sleep)
        self._owns_client = client is None
        self._sleep = sleep
        self._clock = clock

    def run(self, files: Sequence[str]) -> PipelineResult:
        started = self._clock()

        collector = FailureCollector()
        poller = Poller(
            client=self._client,
            poll_interval_seconds=self._settings.poll_interval_seconds,
            on_success=collector.report_success,
            on_failure=collector.report_failure,
            sleep=self._sleep,
        )
        tracker = TrackerDispatcher(poller=poller, capacity=self._settings.concurrency)
        submitter = Submitter(
            client=self._client,
            kind=self._settings.kind,
            on_job=tracker.track,
            on_failure=collector.report_failure,
        )

        collector.start()
        tracker.start()
        try:
            self._submit_all(submitter, files)

            log_event(logger, logging.INFO, "submissions_complete", files=len(files))
            tracker.close()
            tracker.join()

            log_event(logger, logging.INFO, "tracking_complete", jobs=tracker.tracked_jobs)
            collector.close()
            collector.join()
        finally:
            if self._owns_client:
                self._client.close()

        return PipelineResult(
            files_processed=len(files),
            succeeded_jobs=collector.succeeded,
            elapsed_seconds=self._clock() - started,
            failures=collector.failures,
        )

    def _submit_all(self, submitter: Submitter, files: Sequence[str]) -> None:
        """
        Run one submitter thread per file, never more than ``concurrency`` at once.

        Blocks before starting the next submitter while all slots are taken,
        and returns only after every submitter has finished.
        """

        slots = threading.BoundedSemaphore(self._settings.concurrency)
        workers: list[threading.Thread] = []

        def _submit_and_release(filename: str) -> None:
            try:
                submitter.submit(filename)
            finally:
                slots.release()

        for filename in files:
            slots.acquire()
            log_event(logger, logging.INFO, "submit_started", filename=filename)
            worker = threading.Thread(
                target=_submit_and_release,
                args=(filename,),
                name=f"submitter-{len(workers)}",
                daemon=True,
            )
            worker.start()
            workers.append(worker)

        for worker in workers:
            worker.join()
