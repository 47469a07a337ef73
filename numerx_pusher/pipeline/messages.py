"""
Queue markers shared by the pipeline coordinators.
"""

from __future__ import annotations


class EndOfStream:
    """Marker closing a pipeline queue."""

    def __repr__(self) -> str:
        return "END_OF_STREAM"


END_OF_STREAM = EndOfStream()
