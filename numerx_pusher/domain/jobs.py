"""
numerx_pusher/domain/jobs.py

Domain models for submissions tracked through the NumerX pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from numerx_pusher.domain.request_kind import RequestKind


@dataclass(frozen=True)
class Job:
    """
    A submission accepted by the service and identified by its job id.
    """

    job_id: str
    filename: str
    kind: RequestKind

    def __post_init__(self) -> None:
        if not self.job_id:
            raise ValueError("Job requires a non-empty job_id.")


@dataclass(frozen=True)
class FailedJob:
    """
    A file that did not reach terminal success.

    ``job_id`` holds the service id when one was issued, otherwise an error
    tag or an empty string.
    """

    job_id: str
    filename: str
    cause: str
    detail: str = ""


class StepOutcome(str, Enum):
    """
    Classification of one status response.
    """

    TERMINAL_SUCCESS = "terminal_success"
    TERMINAL_FAILURE = "terminal_failure"
    PENDING = "pending"

    @property
    def is_terminal(self) -> bool:
        return self is not StepOutcome.PENDING


@dataclass(frozen=True)
class PipelineResult:
    """
    Outcome of one pusher run.
    """

    files_processed: int
    succeeded_jobs: int
    elapsed_seconds: float
    failures: list[FailedJob] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)
