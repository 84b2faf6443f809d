"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from callsentiment.pipelines.fulfillment import FulfillmentPipeline
from callsentiment.services import (
    ArtifactStore,
    RecordingClient,
    SentimentClient,
    TokenProvider,
    TranscriptionClient,
)
from callsentiment.telemetry import observe_transition


@lru_cache(maxsize=1)
def get_fulfillment_pipeline() -> FulfillmentPipeline:
    """Build the pipeline once from configuration; it holds no per-job state."""

    return FulfillmentPipeline(
        token_provider=TokenProvider.from_config(),
        recording_client=RecordingClient.from_config(),
        transcription_client=TranscriptionClient.from_config(),
        sentiment_client=SentimentClient.from_config(),
        artifact_store=ArtifactStore.from_config(),
        listeners=[observe_transition],
    )


PipelineDep = Annotated[FulfillmentPipeline, Depends(get_fulfillment_pipeline)]


__all__ = ["get_fulfillment_pipeline", "PipelineDep"]
