"""Sentiment client against a mocked analyzeSentiment endpoint."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from callsentiment.services import AnalysisError, SentimentClient
from conftest import SENTIMENT, SENTIMENT_URL


def _client(remote) -> SentimentClient:
    return SentimentClient(
        url=SENTIMENT_URL, api_key="gcp-key", transport=remote.transport
    )


@pytest.mark.parametrize(
    "text",
    ["thanks for calling", "ünïcode ✓ text", "line one\nline two"],
)
def test_analyze_preserves_input_text(remote, text):
    result = asyncio.run(_client(remote).analyze("abc123", text))

    assert result.transcript == text
    assert result.sentiment == SENTIMENT


def test_analyze_sends_plain_text_document(remote):
    asyncio.run(_client(remote).analyze("abc123", "thanks for calling"))

    (request,) = remote.requests
    assert request.url.params["key"] == "gcp-key"
    assert remote.body(request) == {
        "document": {
            "type": "PLAIN_TEXT",
            "language": "en",
            "content": "thanks for calling",
        },
        "encodingType": "UTF8",
    }


def test_analyze_ignores_text_echoed_by_service(remote):
    remote.sentiment_response = lambda: httpx.Response(
        200,
        json={
            "documentSentiment": SENTIMENT,
            "sentences": [{"text": {"content": "something else"}}],
        },
    )

    result = asyncio.run(_client(remote).analyze("abc123", "original"))

    assert result.transcript == "original"


def test_sentiment_json_serializes_score(remote):
    result = asyncio.run(_client(remote).analyze("abc123", "hello"))

    assert json.loads(result.sentiment_json()) == SENTIMENT


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={}),
        httpx.Response(200, json={"documentSentiment": None}),
        httpx.Response(200, json={"sentences": []}),
        httpx.Response(500),
    ],
)
def test_analyze_without_document_sentiment_fails(remote, response):
    remote.sentiment_response = lambda: response

    with pytest.raises(AnalysisError) as excinfo:
        asyncio.run(_client(remote).analyze("abc123", "hello"))

    assert excinfo.value.stage == "analyze"
