"""
numerx_pusher/domain package marker.
"""

from numerx_pusher.domain.jobs import FailedJob, Job, PipelineResult, StepOutcome
from numerx_pusher.domain.request_kind import ProcessingStep, RequestKind, StepStatus

__all__ = [
    "FailedJob",
    "Job",
    "PipelineResult",
    "ProcessingStep",
    "RequestKind",
    "StepOutcome",
    "StepStatus",
]
