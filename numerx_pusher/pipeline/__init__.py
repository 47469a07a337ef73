"""
numerx_pusher/pipeline package marker.
"""

from numerx_pusher.pipeline.collector import FailureCollector
from numerx_pusher.pipeline.driver import PusherPipeline
from numerx_pusher.pipeline.poller import Poller
from numerx_pusher.pipeline.step_machine import classify_steps
from numerx_pusher.pipeline.submitter import Submitter
from numerx_pusher.pipeline.tracker import TrackerDispatcher

__all__ = [
    "FailureCollector",
    "Poller",
    "PusherPipeline",
    "Submitter",
    "TrackerDispatcher",
    "classify_steps",
]
