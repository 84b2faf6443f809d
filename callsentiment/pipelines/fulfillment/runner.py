"""Fulfillment pipeline: one recording notification end to end."""

from __future__ import annotations

import logging
import time
from typing import Iterable, List, Optional

from callsentiment.services import (
    ArtifactStore,
    PipelineError,
    RecordingClient,
    SentimentClient,
    TokenProvider,
    TranscriptionClient,
)
from callsentiment.utils import job_context

from .flow import FulfillmentFlow
from .types import Job, JobState, Stage, Transition, TransitionListener

logger = logging.getLogger(__name__)


class FulfillmentPipeline:
    """Run token → fetch → transcribe → analyze → persist → delete for a job.

    ``run`` is the error boundary of a background job: the first failing stage
    moves the job to ``FAILED`` and is logged, every later stage is skipped and
    nothing is raised to the caller. Deletion only happens after all three
    artifacts are stored.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        recording_client: RecordingClient,
        transcription_client: TranscriptionClient,
        sentiment_client: SentimentClient,
        artifact_store: ArtifactStore,
        listeners: Iterable[TransitionListener] = (),
    ) -> None:
        self._token_provider = token_provider
        self._recordings = recording_client
        self._transcriber = transcription_client
        self._sentiment = sentiment_client
        self._store = artifact_store
        self._listeners: List[TransitionListener] = list(listeners)

    def add_listener(self, listener: TransitionListener) -> None:
        self._listeners.append(listener)

    async def run(self, job: Job) -> None:
        started = time.perf_counter()
        contact_id = job.contact_id
        stage = Stage.TOKEN

        logger.info(
            "contact_id=%s stage=received - fileName:%s",
            contact_id,
            job.file_name,
            extra=job_context(contact_id, "received"),
        )
        self._emit(job, JobState.RECEIVED, None, started)

        try:
            token = await self._token_provider.get_token(contact_id)
            self._complete(job, stage, started)

            stage = Stage.FETCH
            files = await self._recordings.fetch_file(contact_id, token, job.file_name)
            audio = self._recordings.audio_payload(contact_id, files)
            self._complete(job, stage, started)

            stage = Stage.TRANSCRIBE
            transcript = await self._transcriber.transcribe(contact_id, audio)
            self._complete(job, stage, started)

            stage = Stage.ANALYZE
            result = await self._sentiment.analyze(contact_id, transcript)
            self._complete(job, stage, started)

            stage = Stage.PERSIST
            await self._store.persist(
                contact_id,
                self._store.decode_audio(contact_id, audio),
                result.transcript,
                result.sentiment_json(),
            )
            self._complete(job, stage, started)

            stage = Stage.DELETE
            delete_token = await self._token_provider.get_token(contact_id)
            await self._recordings.delete_file(contact_id, delete_token, job.file_name)
            self._complete(job, stage, started)
        except PipelineError as exc:
            logger.error(
                "contact_id=%s stage=%s - job failed: %s",
                contact_id,
                stage.value,
                exc,
                extra=job_context(contact_id, stage.value),
            )
            self._emit(job, JobState.FAILED, stage, started, exc)
            return
        except Exception as exc:
            logger.exception(
                "contact_id=%s stage=%s - job failed unexpectedly: %r",
                contact_id,
                stage.value,
                exc,
                extra=job_context(contact_id, stage.value),
            )
            self._emit(job, JobState.FAILED, stage, started, exc)
            return

        logger.info(
            "contact_id=%s stage=delete - job complete in %.2fs",
            contact_id,
            time.perf_counter() - started,
            extra=job_context(contact_id, "delete"),
        )

    def _complete(self, job: Job, stage: Stage, started: float) -> None:
        state = FulfillmentFlow.completion_state(stage)
        logger.debug(
            "contact_id=%s stage=%s - state %s",
            job.contact_id,
            stage.value,
            state.value,
            extra=job_context(job.contact_id, stage.value),
        )
        self._emit(job, state, stage, started)

    def _emit(
        self,
        job: Job,
        state: JobState,
        stage: Optional[Stage],
        started: float,
        error: Optional[BaseException] = None,
    ) -> None:
        transition = Transition(
            job=job,
            state=state,
            stage=stage,
            elapsed=time.perf_counter() - started,
            error=error,
        )
        for listener in self._listeners:
            try:
                listener(transition)
            except Exception:
                logger.exception(
                    "contact_id=%s - transition listener failed",
                    job.contact_id,
                    extra=job_context(job.contact_id, stage.value if stage else "-"),
                )


__all__ = ["FulfillmentPipeline"]
