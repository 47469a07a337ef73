"""
numerx_pusher/pipeline/tracker.py

Receives accepted jobs and starts one poller thread per job.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Union

from numerx_pusher.domain.jobs import Job
from numerx_pusher.logging_utils import log_event
from numerx_pusher.pipeline.messages import END_OF_STREAM, EndOfStream
from numerx_pusher.pipeline.poller import Poller

logger = logging.getLogger(__name__)


class TrackerDispatcher:
    """
    Spawns a poller per tracked job; does no I/O itself.

    The input queue is bounded. After ``close()`` the dispatcher stops
    accepting jobs, and ``join()`` returns once every poller has finished.
    """

    def __init__(self, *, poller: Poller, capacity: int) -> None:
        self._poller = poller
        self._queue: queue.Queue[Union[Job, EndOfStream]] = queue.Queue(maxsize=max(1, capacity))
        self._pollers: list[threading.Thread] = []
        self._closed = False
        self._thread = threading.Thread(target=self._dispatch, name="tracker-dispatcher", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def track(self, job: Job) -> None:
        """
        Hand a job over for polling; blocks while the queue is full.
        """

        if self._closed:
            raise RuntimeError("Tracker dispatcher is already closed.")
        self._queue.put(job)

    def close(self) -> None:
        self._closed = True
        self._queue.put(END_OF_STREAM)

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    @property
    def tracked_jobs(self) -> int:
        return len(self._pollers)

    def _dispatch(self) -> None:
        while True:
            item = self._queue.get()
            if item is END_OF_STREAM:
                break
            log_event(logger, logging.DEBUG, "tracking_started", job_id=item.job_id, filename=item.filename)
            thread = threading.Thread(
                target=self._poller.run,
                args=(item,),
                name=f"poller-{item.job_id}",
                daemon=True,
            )
            thread.start()
            self._pollers.append(thread)

        log_event(logger, logging.INFO, "tracking_draining", pollers=len(self._pollers))
        for thread in self._pollers:
            thread.join()
