"""
Rendering of the end-of-run summary.
"""

from __future__ import annotations

import json
from datetime import timedelta

from numerx_pusher.domain.jobs import PipelineResult


def format_elapsed(seconds: float) -> str:
    return str(timedelta(seconds=round(max(0.0, seconds), 3)))


def render_text(result: PipelineResult) -> str:
    lines: list[str] = []
    if result.has_failures:
        for failed in result.failures:
            lines.append(f"Failed job: [{failed.job_id}], file: {failed.filename}, cause: {failed.cause}")
    else:
        lines.append("No failed jobs reported")
    lines.append(f"Processed {result.files_processed} files, in {format_elapsed(result.elapsed_seconds)}")
    return "\n".join(lines)


def render_json(result: PipelineResult) -> str:
    payload = {
        "files_processed": result.files_processed,
        "succeeded_jobs": result.succeeded_jobs,
        "failed_jobs": len(result.failures),
        "elapsed_seconds": round(result.elapsed_seconds, 3),
        "failures": [
            {
                "job_id": failed.job_id,
                "filename": failed.filename,
                "cause": failed.cause,
                "detail": failed.detail,
            }
            for failed in result.failures
        ],
    }
    return json.dumps(payload, indent=2)
