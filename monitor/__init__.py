"""Measurement agent core -- scheduling, sampling, selection, and logging."""

from .appender import LogFileTooLargeError, RetryingAppender
from .models import MeasurementProvider, PingOutcome, SpeedTestOutcome
from .pipeline import MeasurementPipeline
from .sampler import HostRotation, PingSampler
from .scheduler import DualLoopScheduler
from .selector import NoServersError, ServerSelector

__all__ = [
    "DualLoopScheduler",
    "HostRotation",
    "LogFileTooLargeError",
    "MeasurementPipeline",
    "MeasurementProvider",
    "NoServersError",
    "PingOutcome",
    "PingSampler",
    "RetryingAppender",
    "ServerSelector",
    "SpeedTestOutcome",
]
