"""
numerx_pusher/domain/request_kind.py

Upload categories accepted by the NumerX service and their processing steps.
"""

from __future__ import annotations

from enum import Enum

from numerx_pusher.errors import UnknownRequestKindError

VIEWERSHIP_TIMESTAMP_COLUMN = "event_date"
VIEWERSHIP_TIMESTAMP_FORMAT = "event_date,timestamp,regex (.*),$1 00:00:00"
CSV_HEADER_LINE = "1"


class StepStatus(str, Enum):
    """
    Status values with a defined meaning; anything else is in progress.
    """

    SUCCESS = "success"
    FAILED = "failed"


class ProcessingStep(str, Enum):
    """
    Server-side ingestion steps, in pipeline order per kind family.
    """

    RAW_EVENT = "rawevent"
    PARSED_EVENT = "parsedevent"
    EVENT_INDEX = "eventindexstatus"
    RAW_META = "rawmeta"
    PARSED_META = "parsedmeta"
    META_INDEX = "metaindexstatus"


_EVENT_UPSTREAM_STEPS = frozenset({ProcessingStep.RAW_EVENT.value, ProcessingStep.PARSED_EVENT.value})
_META_UPSTREAM_STEPS = frozenset({ProcessingStep.RAW_META.value, ProcessingStep.PARSED_META.value})


class RequestKind(Enum):
    """
    What an upload is about: selector token, URL path and optional row key.
    """

    VIEWERSHIP = ("events", "/events/viewer", "")
    META_CHAN_MAP = ("meta-chanmap", "/meta/chanmap", "display_channel_number")
    META_BILLING = ("meta-billing", "/meta/billing", "device_id")
    META_PROGRAM = ("meta-program", "/meta/program_id", "ID")
    META_EVENT_MAP = ("meta-eventmap", "/meta/eventmap", "Event_Type")

    def __init__(self, token: str, path: str, row_key: str) -> None:
        self.token = token
        self.path = path
        self.row_key = row_key

    @property
    def is_meta(self) -> bool:
        return self is not RequestKind.VIEWERSHIP

    @property
    def terminal_step(self) -> str:
        if self.is_meta:
            return ProcessingStep.META_INDEX.value
        return ProcessingStep.EVENT_INDEX.value

    @property
    def upstream_steps(self) -> frozenset[str]:
        if self.is_meta:
            return _META_UPSTREAM_STEPS
        return _EVENT_UPSTREAM_STEPS

    def submit_params(self) -> dict[str, str]:
        """
        Query parameters sent with the POST for this kind.
        """

        if self.is_meta:
            return {"key": self.row_key, "csvHeaderLine": CSV_HEADER_LINE}
        return {
            "timestamp": VIEWERSHIP_TIMESTAMP_COLUMN,
            "format": VIEWERSHIP_TIMESTAMP_FORMAT,
            "csvHeaderLine": CSV_HEADER_LINE,
        }

    @classmethod
    def tokens(cls) -> list[str]:
        return [kind.token for kind in cls]

    @classmethod
    def from_token(cls, token: str) -> "RequestKind":
        """
        Resolve a CLI selector token such as ``meta-chanmap``.
        """

        normalized = (token or "").strip().lower()
        for kind in cls:
            if kind.token == normalized:
                return kind
        raise UnknownRequestKindError(token, cls.tokens())
