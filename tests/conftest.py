"""Shared fakes for the remote services the pipeline talks to."""

from __future__ import annotations

import base64
import json
from pathlib import Path
import sys
from typing import Any, Callable

import httpx
from botocore.exceptions import ClientError
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from callsentiment.pipelines.fulfillment import FulfillmentPipeline  # noqa: E402
from callsentiment.services import (  # noqa: E402
    ArtifactStore,
    RecordingClient,
    SentimentClient,
    TokenProvider,
    TranscriptionClient,
)

TOKEN_URL = "https://api.incontact.test/InContactAuthorizationServer/Token"
BASE_URI = "https://api-c1.incontact.test/inContactAPI/"
STT_URL = "https://speech.googleapis.test/v1/speech:recognize"
SENTIMENT_URL = "https://language.googleapis.test/v1/documents:analyzeSentiment"
FILES_PATH = "/inContactAPI/services/v11.0/files"

AUDIO_BYTES = b"RIFF\x24\x00\x00\x00WAVEfmt fake recording"
AUDIO_B64 = base64.b64encode(AUDIO_BYTES).decode("ascii")
SENTIMENT = {"magnitude": 0.8, "score": 0.4}


class FakeS3Client:
    """Records ``upload_fileobj`` calls; optionally fails on chosen keys."""

    def __init__(self, fail_keys: tuple[str, ...] = ()) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.attempts: list[str] = []
        self._fail_keys = fail_keys

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        self.attempts.append(key)
        if key in self._fail_keys:
            raise ClientError(
                {"Error": {"Code": "AccessDenied", "Message": "denied"}},
                "PutObject",
            )
        content_type = (ExtraArgs or {}).get("ContentType", "")
        self.objects[key] = (fileobj.read(), content_type)


class FakeRemote:
    """Routes requests for the four REST services to canned responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token_response: Callable[[], httpx.Response] = lambda: httpx.Response(
            200,
            json={
                "access_token": "token-1",
                "resource_server_base_uri": BASE_URI,
            },
        )
        self.fetch_response: Callable[[], httpx.Response] = lambda: httpx.Response(
            200,
            json={"files": {"fileName": "abc123.wav", "file": AUDIO_B64}},
        )
        self.delete_response: Callable[[], httpx.Response] = lambda: httpx.Response(
            200
        )
        self.stt_response: Callable[[], httpx.Response] = lambda: httpx.Response(
            200,
            json={"results": [{"alternatives": [{"transcript": "thanks for calling"}]}]},
        )
        self.sentiment_response: Callable[[], httpx.Response] = lambda: httpx.Response(
            200,
            json={"documentSentiment": SENTIMENT, "language": "en"},
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url.startswith(TOKEN_URL):
            return self.token_response()
        if request.url.path == FILES_PATH and request.method == "GET":
            return self.fetch_response()
        if request.url.path == FILES_PATH and request.method == "DELETE":
            return self.delete_response()
        if url.startswith(STT_URL):
            return self.stt_response()
        if url.startswith(SENTIMENT_URL):
            return self.sentiment_response()
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path_fragment: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and path_fragment in str(r.url)
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def s3() -> FakeS3Client:
    return FakeS3Client()


def build_pipeline(
    remote: FakeRemote,
    s3: FakeS3Client,
    listeners=(),
) -> FulfillmentPipeline:
    transport = remote.transport
    return FulfillmentPipeline(
        token_provider=TokenProvider(
            token_url=TOKEN_URL,
            basic_auth_key="a2V5",
            username="user",
            password="pwd",
            transport=transport,
        ),
        recording_client=RecordingClient(version="v11.0", transport=transport),
        transcription_client=TranscriptionClient(
            url=STT_URL, api_key="gcp-key", transport=transport
        ),
        sentiment_client=SentimentClient(
            url=SENTIMENT_URL, api_key="gcp-key", transport=transport
        ),
        artifact_store=ArtifactStore(bucket_name="recordings", client=s3),
        listeners=listeners,
    )
