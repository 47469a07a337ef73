"""
numerx_pusher/pipeline/step_machine.py

Interpretation of the service's per-job step list.

Rules, evaluated over the whole list for the job's kind:

- terminal step ``failed``  -> TERMINAL_FAILURE (wins over a terminal
  ``success`` in a malformed response)
- terminal step ``success`` -> TERMINAL_SUCCESS (wins over failed
  upstream entries; the pipeline only advances on success)
- upstream step ``failed``  -> TERMINAL_FAILURE
- anything else             -> PENDING

Classification is a pure function of the kind and the reports.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from numerx_pusher.domain.jobs import StepOutcome
from numerx_pusher.domain.request_kind import RequestKind, StepStatus


class StepEntry(Protocol):
    step: str
    status: str


def _normalized(value: str | None) -> str:
    return (value or "").strip().lower()


def classify_steps(kind: RequestKind, reports: Iterable[StepEntry]) -> StepOutcome:
    terminal_success = False
    terminal_failed = False
    upstream_failed = False

    for entry in reports:
        step = _normalized(entry.step)
        status = _normalized(entry.status)
        if step == kind.terminal_step:
            if status == StepStatus.FAILED.value:
                terminal_failed = True
            elif status == StepStatus.SUCCESS.value:
                terminal_success = True
        elif step in kind.upstream_steps and status == StepStatus.FAILED.value:
            upstream_failed = True

    if terminal_failed:
        return StepOutcome.TERMINAL_FAILURE
    if terminal_success:
        return StepOutcome.TERMINAL_SUCCESS
    if upstream_failed:
        return StepOutcome.TERMINAL_FAILURE
    return StepOutcome.PENDING


def failed_steps(kind: RequestKind, reports: Sequence[StepEntry]) -> list[str]:
    """
    Names of the kind's pipeline steps reported as failed, in report order.
    """

    known_steps = kind.upstream_steps | {kind.terminal_step}
    return [
        _normalized(entry.step)
        for entry in reports
        if _normalized(entry.step) in known_steps and _normalized(entry.status) == StepStatus.FAILED.value
    ]
