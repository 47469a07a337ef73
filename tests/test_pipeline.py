"""
tests/test_pipeline.py

End-to-end runs of PusherPipeline against the scripted fake service.

Coverage
--------
- S1 single viewership success
- S2 meta upload with upstream failure
- S3 eventual success after pending polls
- S4 HTTP 500 on submit
- S5 transport retries then success
- Broken connections mid-response on submit and poll
- S6 concurrency cap with many files
- One poller per job, report completeness, retry bound
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from fakes import (
    EVENT_SUCCESS,
    META_SUCCESS,
    FakeNumerXSession,
    FakeResponse,
    SleepRecorder,
    connection_broken,
    connection_refused,
    steps,
)
from numerx_pusher import failure_codes
from numerx_pusher.config import PusherSettings
from numerx_pusher.connectors.numerx_client import NumerXClient
from numerx_pusher.domain.jobs import PipelineResult
from numerx_pusher.domain.request_kind import RequestKind
from numerx_pusher.pipeline.driver import PusherPipeline


def _run(settings: PusherSettings, session: FakeNumerXSession, files: list[str]) -> PipelineResult:
    sleep = SleepRecorder()
    client = NumerXClient(settings=settings, session=session, sleep=sleep)
    pipeline = PusherPipeline(settings=settings, client=client, sleep=sleep)
    return pipeline.run(files)


def test_s1_single_viewership_success(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    path = make_csv("a.csv")
    session = FakeNumerXSession(
        post_handler=lambda req, i: FakeResponse(200, {"id": "J1"}),
        status_handler=lambda job_id, i: FakeResponse(200, EVENT_SUCCESS),
    )

    result = _run(settings, session, [path])

    assert result.failures == []
    assert result.files_processed == 1
    assert result.succeeded_jobs == 1
    assert session.posts()[0].path.endswith("/events/viewer")
    assert [get.params for get in session.gets()] == [{"id": "J1"}]


def test_s2_meta_upstream_failure(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    path = make_csv("b.csv")
    session = FakeNumerXSession(
        post_handler=lambda req, i: FakeResponse(200, {"id": "J2"}),
        status_handler=lambda job_id, i: FakeResponse(
            200, steps(("rawmeta", "success"), ("parsedmeta", "failed"))
        ),
    )

    result = _run(replace(settings, kind=RequestKind.META_CHAN_MAP), session, [path])

    posted = session.posts()[0]
    assert posted.params["key"] == "display_channel_number"
    assert posted.params["csvHeaderLine"] == "1"
    assert [(failed.job_id, failed.filename) for failed in result.failures] == [("J2", path)]
    assert result.failures[0].cause == failure_codes.PIPELINE_STEP_FAILED
    assert result.succeeded_jobs == 0


def test_s3_eventual_success_after_pending(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    responses = [
        FakeResponse(200, []),
        FakeResponse(200, steps(("rawevent", "success"))),
        FakeResponse(200, steps(("eventindexstatus", "success"))),
    ]
    session = FakeNumerXSession(status_handler=lambda job_id, i: responses[min(i, 2)])

    result = _run(settings, session, [make_csv("c.csv")])

    assert result.failures == []
    assert result.succeeded_jobs == 1
    assert len(session.gets("J1")) == 3


def test_s4_http_500_on_submit(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    path = make_csv("d.csv")
    session = FakeNumerXSession(post_handler=lambda req, i: FakeResponse(500, "internal error"))

    result = _run(settings, session, [path])

    (failed,) = result.failures
    assert (failed.job_id, failed.filename) == ("", path)
    assert failed.cause == failure_codes.SUBMIT_HTTP_ERROR
    assert session.gets() == []


def test_s5_transport_retries_then_success(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    session = FakeNumerXSession(
        post_handler=lambda req, i: connection_refused() if i < 2 else FakeResponse(200, {"id": "J5"}),
        status_handler=lambda job_id, i: FakeResponse(200, EVENT_SUCCESS),
    )

    result = _run(replace(settings, retry_count=3), session, [make_csv("e.csv")])

    assert len(session.posts()) == 3
    assert [get.params["id"] for get in session.gets()] == ["J5"]
    assert result.failures == []
    assert result.succeeded_jobs == 1


def test_broken_connections_are_retried_end_to_end(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    session = FakeNumerXSession(
        post_handler=lambda req, i: connection_broken() if i == 0 else FakeResponse(200, {"id": "J7"}),
        status_handler=lambda job_id, i: connection_broken() if i == 0 else FakeResponse(200, EVENT_SUCCESS),
    )

    result = _run(settings, session, [make_csv("broken.csv")])

    assert result.failures == []
    assert result.succeeded_jobs == 1
    assert len(session.posts()) == 2
    assert len(session.gets("J7")) == 2


def test_retry_bound_exhausted_yields_one_failure_and_no_job(
    settings: PusherSettings, make_csv: Callable[..., str]
) -> None:
    session = FakeNumerXSession(post_handler=lambda req, i: connection_refused())

    result = _run(replace(settings, retry_count=3), session, [make_csv("e.csv")])

    assert len(session.posts()) == 3
    assert session.gets() == []
    (failed,) = result.failures
    assert failed.cause == failure_codes.SUBMIT_TRANSPORT_ERROR
    assert result.succeeded_jobs == 0


def test_s6_concurrency_cap(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    files = [make_csv(f"batch/file_{index:02d}.csv") for index in range(50)]
    session = FakeNumerXSession(post_delay_seconds=0.05)

    result = _run(replace(settings, concurrency=5), session, files)

    assert session.max_concurrent_posts == 5
    assert len(session.posts()) == 50
    assert result.files_processed == 50
    assert result.succeeded_jobs == 50
    assert result.failures == []


def test_one_poller_per_job(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    files = [make_csv(f"p{index}.csv") for index in range(8)]
    session = FakeNumerXSession(
        status_handler=lambda job_id, i: FakeResponse(200, EVENT_SUCCESS if i >= 3 else []),
        status_delay_seconds=0.01,
    )

    result = _run(replace(settings, concurrency=3), session, files)

    assert result.succeeded_jobs == 8
    assert set(session.max_concurrent_gets_per_job) == {f"J{i}" for i in range(1, 9)}
    assert all(count == 1 for count in session.max_concurrent_gets_per_job.values())
    assert all(len(session.gets(job_id)) == 4 for job_id in session.max_concurrent_gets_per_job)


def test_report_is_complete_for_mixed_outcomes(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    job_ids = {b"ok": "J-ok", b"step_failed": "J-step", b"status_missing": "J-404"}
    ok = make_csv("ok.csv", "ok")
    rejected = make_csv("rejected.csv", "rejected")
    step_failed = make_csv("step_failed.csv", "step_failed")
    status_missing = make_csv("status_missing.csv", "status_missing")
    unreadable = ok.replace("ok.csv", "never_written.csv")

    def _post(req, i):
        if req.data not in job_ids:
            return FakeResponse(500, "rejected")
        return FakeResponse(200, {"id": job_ids[req.data]})

    def _status(job_id, i):
        if job_id == "J-step":
            return FakeResponse(200, steps(("rawevent", "success"), ("eventindexstatus", "failed")))
        if job_id == "J-404":
            return FakeResponse(404, "no such job")
        return FakeResponse(200, EVENT_SUCCESS)

    session = FakeNumerXSession(post_handler=_post, status_handler=_status)

    result = _run(settings, session, [ok, rejected, step_failed, status_missing, unreadable])

    by_file = {failed.filename: failed for failed in result.failures}
    assert len(result.failures) == 4
    assert set(by_file) == {rejected, step_failed, status_missing, unreadable}
    assert by_file[rejected].cause == failure_codes.SUBMIT_HTTP_ERROR
    assert by_file[step_failed].cause == failure_codes.PIPELINE_STEP_FAILED
    assert by_file[status_missing].cause == failure_codes.STATUS_HTTP_ERROR
    assert by_file[unreadable].cause == failure_codes.FILE_READ_ERROR
    assert result.succeeded_jobs == 1


def test_meta_kinds_track_meta_steps(settings: PusherSettings, make_csv: Callable[..., str]) -> None:
    session = FakeNumerXSession(status_handler=lambda job_id, i: FakeResponse(200, META_SUCCESS))

    result = _run(replace(settings, kind=RequestKind.META_BILLING), session, [make_csv("billing.csv")])

    assert result.failures == []
    assert session.posts()[0].params == {"key": "device_id", "csvHeaderLine": "1"}


def test_empty_file_list_completes(settings: PusherSettings) -> None:
    session = FakeNumerXSession()

    result = _run(settings, session, [])

    assert result.files_processed == 0
    assert result.failures == []
    assert session.requests == []
