"""Google Speech-to-Text integration over the REST recognize endpoint."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx

from callsentiment.config.settings import GoogleConfig, settings
from callsentiment.utils import job_context

from .errors import TranscriptionError
from .http import create_async_client, read_json, send_request

logger = logging.getLogger(__name__)


class TranscriptionClient:
    """Convert base64 audio into text with a single synchronous recognize call."""

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        language_code: str = "en-US",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._language_code = language_code
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: GoogleConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "TranscriptionClient":
        config = config or settings.google
        return cls(
            url=config.stt_url,
            api_key=config.api_key.get_secret_value(),
            language_code=config.language_code,
            transport=transport,
        )

    async def transcribe(self, contact_id: str, audio_base64: str) -> str:
        """Return the primary transcript or raise :class:`TranscriptionError`."""

        body = {
            "audio": {"content": audio_base64},
            "config": {"languageCode": self._language_code},
        }

        try:
            async with create_async_client(self._transport) as client:
                response = await send_request(
                    client,
                    "POST",
                    self._url,
                    error=TranscriptionError,
                    contact_id=contact_id,
                    params={"key": self._api_key},
                    json=body,
                    headers={"Content-Type": "application/json; charset=utf-8"},
                )
            payload = read_json(
                response, error=TranscriptionError, contact_id=contact_id
            )
            transcript = primary_transcript(payload)
            if transcript is None:
                raise TranscriptionError(contact_id, "Invalid/missing result value")
        except TranscriptionError as exc:
            logger.error(
                "contact_id=%s stage=transcribe - %s",
                contact_id,
                exc,
                extra=job_context(contact_id, "transcribe"),
            )
            raise

        logger.info(
            "contact_id=%s stage=transcribe - transcript length:%d",
            contact_id,
            len(transcript),
            extra=job_context(contact_id, "transcribe"),
        )
        return transcript


def primary_transcript(payload: Any) -> str | None:
    """Walk ``results[0].alternatives[0].transcript``; ``None`` if any link is absent."""

    if not isinstance(payload, Mapping):
        return None
    results = payload.get("results")
    if not _non_empty_list(results) or not isinstance(results[0], Mapping):
        return None
    alternatives = results[0].get("alternatives")
    if not _non_empty_list(alternatives) or not isinstance(alternatives[0], Mapping):
        return None
    transcript = alternatives[0].get("transcript")
    if not isinstance(transcript, str) or not transcript:
        return None
    return transcript


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str) and len(value) > 0


__all__ = ["TranscriptionClient", "primary_transcript"]
