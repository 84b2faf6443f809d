"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    JOB_DURATION,
    JOB_FAILURES,
    JOBS_IN_PROGRESS,
    JOBS_STARTED,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_TRANSITIONS,
    observe_request,
    observe_transition,
)

__all__ = [
    "ERROR_COUNTER",
    "JOB_DURATION",
    "JOB_FAILURES",
    "JOBS_IN_PROGRESS",
    "JOBS_STARTED",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_TRANSITIONS",
    "observe_request",
    "observe_transition",
]
