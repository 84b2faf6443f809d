"""Google Natural Language sentiment analysis over REST."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from callsentiment.config.settings import GoogleConfig, settings
from callsentiment.utils import job_context

from .errors import AnalysisError
from .http import create_async_client, read_json, send_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentimentResult:
    """Transcript paired with the document-level sentiment computed for it."""

    transcript: str
    sentiment: Mapping[str, Any]

    def sentiment_json(self) -> str:
        """Serialize the sentiment score for storage."""

        return json.dumps(dict(self.sentiment))


class SentimentClient:
    """Score a plain-text document with the analyzeSentiment endpoint."""

    def __init__(
        self,
        *,
        url: str,
        api_key: str,
        language: str = "en",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._language = language
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: GoogleConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "SentimentClient":
        config = config or settings.google
        return cls(
            url=config.sentiment_url,
            api_key=config.api_key.get_secret_value(),
            language=config.document_language,
            transport=transport,
        )

    async def analyze(self, contact_id: str, text: str) -> SentimentResult:
        """Return ``text`` with its sentiment or raise :class:`AnalysisError`."""

        body = {
            "document": {
                "type": "PLAIN_TEXT",
                "language": self._language,
                "content": text,
            },
            "encodingType": "UTF8",
        }

        try:
            async with create_async_client(self._transport) as client:
                response = await send_request(
                    client,
                    "POST",
                    self._url,
                    error=AnalysisError,
                    contact_id=contact_id,
                    params={"key": self._api_key},
                    json=body,
                    headers={"Content-Type": "application/json; charset=utf-8"},
                )
            payload = read_json(response, error=AnalysisError, contact_id=contact_id)
            sentiment = (
                payload.get("documentSentiment")
                if isinstance(payload, Mapping)
                else None
            )
            if not isinstance(sentiment, Mapping):
                raise AnalysisError(contact_id, "Invalid/missing result value")
        except AnalysisError as exc:
            logger.error(
                "contact_id=%s stage=analyze - %s",
                contact_id,
                exc,
                extra=job_context(contact_id, "analyze"),
            )
            raise

        logger.info(
            "contact_id=%s stage=analyze - sentiment analysis complete",
            contact_id,
            extra=job_context(contact_id, "analyze"),
        )
        return SentimentResult(transcript=text, sentiment=sentiment)


__all__ = ["SentimentClient", "SentimentResult"]
