"""Typed containers shared across the fulfillment pipeline.

These live in their own module so ``flow``, ``runner`` and the telemetry
listeners can import them without creating circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class Stage(str, Enum):
    """Named step of a fulfillment job."""

    TOKEN = "token"
    FETCH = "fetch"
    TRANSCRIBE = "transcribe"
    ANALYZE = "analyze"
    PERSIST = "persist"
    DELETE = "delete"


class JobState(str, Enum):
    """Position of a job in its state machine."""

    RECEIVED = "received"
    TOKEN_ACQUIRED = "token_acquired"
    FILE_FETCHED = "file_fetched"
    TRANSCRIBED = "transcribed"
    ANALYZED = "analyzed"
    PERSISTED = "persisted"
    DELETED = "deleted"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (JobState.DELETED, JobState.FAILED)


@dataclass(frozen=True)
class Job:
    """One recording notification to fulfil."""

    contact_id: str
    file_name: str


@dataclass(frozen=True)
class Transition:
    """A state change observed while a job runs."""

    job: Job
    state: JobState
    stage: Optional[Stage]
    elapsed: float
    error: Optional[BaseException] = None


TransitionListener = Callable[[Transition], None]


__all__ = ["Stage", "JobState", "Job", "Transition", "TransitionListener"]
