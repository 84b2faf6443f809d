"""Ordered map of the fulfillment pipeline.

The runner in ``callsentiment.pipelines.fulfillment.runner`` executes these
stages strictly in order; each one starts only after the previous completed:

1. ``token`` – exchange InContact credentials for a bearer token.
2. ``fetch`` – download the base64 recording from the files API.
3. ``transcribe`` – Google Speech-to-Text recognize call.
4. ``analyze`` – Google Natural Language document sentiment.
5. ``persist`` – upload audio, transcript and sentiment to S3.
6. ``delete`` – fresh token, then remove the source recording.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from .types import JobState, Stage


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the fulfillment pipeline."""

    order: int
    stage: Stage
    completes: JobState
    module: str
    summary: str


class FulfillmentFlow:
    """Canonical stage order and the state each stage moves a job into."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            Stage.TOKEN,
            JobState.TOKEN_ACQUIRED,
            "callsentiment.services.incontact",
            "Request a password-grant API token and resource base URI.",
        ),
        PipelineStage(
            2,
            Stage.FETCH,
            JobState.FILE_FETCHED,
            "callsentiment.services.incontact",
            "Fetch the recording named in the notification as base64.",
        ),
        PipelineStage(
            3,
            Stage.TRANSCRIBE,
            JobState.TRANSCRIBED,
            "callsentiment.services.transcribe",
            "Convert the recording to text with the speech recognizer.",
        ),
        PipelineStage(
            4,
            Stage.ANALYZE,
            JobState.ANALYZED,
            "callsentiment.services.sentiment",
            "Score the transcript and pair it with its document sentiment.",
        ),
        PipelineStage(
            5,
            Stage.PERSIST,
            JobState.PERSISTED,
            "callsentiment.services.storage",
            "Upload the .wav, .txt and .json artifacts under the contact prefix.",
        ),
        PipelineStage(
            6,
            Stage.DELETE,
            JobState.DELETED,
            "callsentiment.services.incontact",
            "Re-authenticate and delete the source recording.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    @classmethod
    def completion_state(cls, stage: Stage) -> JobState:
        """Return the state a job enters once ``stage`` succeeds."""

        for descriptor in cls._STAGES:
            if descriptor.stage is stage:
                return descriptor.completes
        raise KeyError(stage)


__all__ = ["FulfillmentFlow", "PipelineStage"]
