"""
Response payload schemas for the NumerX submit and status endpoints.

The service has been observed to emit both ``id/step/status`` and the
capitalised ``ID/Step/Status`` spellings, so both are accepted.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from numerx_pusher.errors import ResponseParseError


class SubmitResponse(BaseModel):
    """Body of a successful POST: ``{"id": "<opaque string>"}``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(validation_alias=AliasChoices("id", "ID", "Id"))


class StepReport(BaseModel):
    """One entry of the status list returned for a job."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(default="", validation_alias=AliasChoices("id", "ID", "Id"))
    step: str = Field(default="", validation_alias=AliasChoices("step", "Step"))
    status: str = Field(default="", validation_alias=AliasChoices("status", "Status"))
    timestamp: int = Field(default=0, validation_alias=AliasChoices("timestamp", "Timestamp"))
    notes: str | None = Field(default="", validation_alias=AliasChoices("notes", "Notes"))


_STATUS_LIST_ADAPTER = TypeAdapter(list[StepReport])


def parse_submit_response(body: bytes | str) -> str:
    """
    Extract the job id from a submit response body.

    Raises:
        ResponseParseError: If the body is not a JSON object with a
            non-empty ``id``.
    """

    try:
        response = SubmitResponse.model_validate_json(body)
    except ValidationError as exc:
        raise ResponseParseError(f"Submit response is not a valid id payload: {exc.errors()}") from exc

    job_id = response.id.strip()
    if not job_id:
        raise ResponseParseError("Submit response carried an empty id.")
    return job_id


def parse_status_response(body: bytes | str) -> list[StepReport]:
    """
    Decode a status response body into step reports, preserving order.

    Raises:
        ResponseParseError: If the body is not a JSON list of step objects.
    """

    try:
        return _STATUS_LIST_ADAPTER.validate_json(body)
    except ValidationError as exc:
        raise ResponseParseError(f"Status response is not a valid step list: {exc.errors()}") from exc
