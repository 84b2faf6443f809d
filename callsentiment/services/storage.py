"""S3 storage for the audio, transcript and sentiment artifacts of a job."""

from __future__ import annotations

import base64
import binascii
import io
import logging
from dataclasses import dataclass
from typing import Any

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from callsentiment.config.settings import S3Config, settings
from callsentiment.utils import job_context

from .errors import StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    """One blob written to the bucket."""

    key: str
    data: bytes
    content_type: str


@dataclass(frozen=True)
class ArtifactSet:
    """The three artifacts of a job, grouped under ``{contact_id}/``."""

    contact_id: str
    audio: bytes
    transcript: str
    sentiment_json: str

    @property
    def prefix(self) -> str:
        return f"{self.contact_id}/"

    def key(self, extension: str) -> str:
        return f"{self.prefix}{self.contact_id}.{extension.lstrip('.')}"

    def artifacts(self) -> tuple[Artifact, ...]:
        """Return the blobs in upload order: audio, transcript, sentiment."""

        return (
            Artifact(self.key("wav"), self.audio, "audio/wav"),
            Artifact(
                self.key("txt"),
                self.transcript.encode("utf-8"),
                "text/plain; charset=utf-8",
            ),
            Artifact(
                self.key("json"),
                self.sentiment_json.encode("utf-8"),
                "application/json",
            ),
        )


def create_s3_client(config: S3Config | None = None) -> Any:
    """Instantiate an S3 client using configured credentials if available."""

    config = config or settings.s3
    client_kwargs: dict[str, Any] = {"region_name": config.region}
    if config.access_key and config.secret_key:
        client_kwargs["aws_access_key_id"] = config.access_key
        client_kwargs["aws_secret_access_key"] = config.secret_key
    if config.endpoint_url:
        client_kwargs["endpoint_url"] = config.endpoint_url
    return boto3.client("s3", **client_kwargs)


class ArtifactStore:
    """Persist job artifacts with streamed uploads to a single bucket."""

    def __init__(self, *, bucket_name: str, client: Any) -> None:
        self._bucket_name = bucket_name
        self._client = client

    @classmethod
    def from_config(cls, config: S3Config | None = None) -> "ArtifactStore":
        config = config or settings.s3
        return cls(bucket_name=config.bucket_name, client=create_s3_client(config))

    @staticmethod
    def decode_audio(contact_id: str, payload: str) -> bytes:
        """Decode the base64 recording right before it is stored.

        Line breaks and other non-alphabet characters are skipped, so wrapped
        payloads decode; only input that cannot be decoded at all (bad
        padding) raises ``StoreError``.
        """

        try:
            return base64.b64decode(payload)
        except (binascii.Error, ValueError) as exc:
            error = StoreError(
                contact_id,
                f"Audio payload is not valid base64: {exc}",
                object_key=f"{contact_id}/{contact_id}.wav",
            )
            logger.error(
                "contact_id=%s stage=persist - %s",
                contact_id,
                error,
                extra=job_context(contact_id, "persist"),
            )
            raise error from exc

    async def persist(
        self,
        contact_id: str,
        audio: bytes,
        transcript: str,
        sentiment_json: str,
    ) -> ArtifactSet:
        """Upload all three artifacts in order, stopping at the first failure."""

        artifact_set = ArtifactSet(
            contact_id=contact_id,
            audio=audio,
            transcript=transcript,
            sentiment_json=sentiment_json,
        )
        for artifact in artifact_set.artifacts():
            await self._save(contact_id, artifact)
        return artifact_set

    async def _save(self, contact_id: str, artifact: Artifact) -> None:
        if not self._bucket_name:
            error = StoreError(
                contact_id,
                "S3 bucket name is not configured.",
                object_key=artifact.key,
            )
            logger.error(
                "contact_id=%s stage=persist - %s",
                contact_id,
                error,
                extra=job_context(contact_id, "persist"),
            )
            raise error

        try:
            await run_in_threadpool(
                self._client.upload_fileobj,
                io.BytesIO(artifact.data),
                self._bucket_name,
                artifact.key,
                ExtraArgs={"ContentType": artifact.content_type},
            )
        except (BotoCoreError, ClientError, S3UploadFailedError) as exc:
            error = StoreError(
                contact_id,
                f"Failed to upload artifact: {exc}",
                object_key=artifact.key,
            )
            logger.error(
                "contact_id=%s stage=persist - %s",
                contact_id,
                error,
                extra=job_context(contact_id, "persist"),
            )
            raise error from exc

        logger.info(
            "contact_id=%s stage=persist - %s uploaded",
            contact_id,
            artifact.key,
            extra=job_context(contact_id, "persist"),
        )


__all__ = ["Artifact", "ArtifactSet", "ArtifactStore", "create_s3_client"]
