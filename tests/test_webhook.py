"""HTTP surface: webhook acknowledgement, health and metrics."""

from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest
from fastapi import BackgroundTasks
from fastapi.testclient import TestClient

from callsentiment.config.settings import settings
from callsentiment.controllers.dependencies import get_fulfillment_pipeline
from callsentiment.controllers.recordings import receive_recording
from callsentiment.main import app, create_app
from callsentiment.pipelines.fulfillment import Job
from callsentiment.views import RecordingNotification
from conftest import build_pipeline


class FakePipeline:
    def __init__(self) -> None:
        self.jobs: list[Job] = []

    async def run(self, job: Job) -> None:
        self.jobs.append(job)


class ExplodingPipeline:
    async def run(self, job: Job) -> None:
        raise AssertionError("the pipeline must not run for this request")


@pytest.fixture
def fake_pipeline():
    pipeline = FakePipeline()
    app.dependency_overrides[get_fulfillment_pipeline] = lambda: pipeline

    yield pipeline

    app.dependency_overrides.clear()


def test_webhook_acknowledges_and_schedules_job(fake_pipeline):
    client = TestClient(app)

    response = client.post(
        settings.webhook_path,
        json={"contactId": "abc123", "fileName": "/rec/abc123.wav"},
    )

    assert response.status_code == 200
    assert response.content == b""
    assert fake_pipeline.jobs == [Job(contact_id="abc123", file_name="/rec/abc123.wav")]


def test_webhook_responds_before_the_job_runs():
    pipeline = FakePipeline()
    background_tasks = BackgroundTasks()
    notification = RecordingNotification(contactId="abc123", fileName="/rec/abc123.wav")

    response = asyncio.run(receive_recording(notification, background_tasks, pipeline))

    assert response.status_code == 200
    assert pipeline.jobs == []
    assert len(background_tasks.tasks) == 1

    asyncio.run(background_tasks())

    assert pipeline.jobs == [Job(contact_id="abc123", file_name="/rec/abc123.wav")]


def test_webhook_acknowledges_even_when_job_fails_later(remote, s3):
    remote.stt_response = lambda: httpx.Response(200, json={"results": []})
    pipeline = build_pipeline(remote, s3)
    app.dependency_overrides[get_fulfillment_pipeline] = lambda: pipeline
    try:
        client = TestClient(app)
        response = client.post(
            settings.webhook_path,
            json={"contactId": "abc123", "fileName": "/rec/abc123.wav"},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.content == b""
    assert len(remote.calls("GET", "/files")) == 1
    assert s3.attempts == []
    assert remote.calls("DELETE", "/files") == []


@pytest.mark.parametrize(
    "body",
    [
        {"contactId": "abc123"},
        {"fileName": "/rec/abc123.wav"},
        {"contactId": 123, "fileName": "/rec/abc123.wav"},
    ],
)
def test_webhook_rejects_malformed_notification(body):
    app.dependency_overrides[get_fulfillment_pipeline] = ExplodingPipeline
    try:
        client = TestClient(app)
        response = client.post(settings.webhook_path, json=body)
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 422


def test_health_lists_pipeline_stages():
    client = TestClient(app)

    payload = client.get("/health").json()

    assert payload["status"] == "healthy"
    assert [stage["stage"] for stage in payload["stages"]] == [
        "token",
        "fetch",
        "transcribe",
        "analyze",
        "persist",
        "delete",
    ]
    assert [stage["order"] for stage in payload["stages"]] == [1, 2, 3, 4, 5, 6]
    persist = payload["stages"][4]
    assert persist["completes"] == "persisted"
    assert persist["module"] == "callsentiment.services.storage"
    assert persist["summary"]


class _Collector(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.mark.parametrize(("log_level", "emits_json"), [("debug", True), ("info", False)])
def test_request_json_log_line_follows_log_level(monkeypatch, log_level, emits_json):
    monkeypatch.setattr(settings, "log_level", log_level)
    local_app = create_app()
    collector = _Collector()
    request_logger = logging.getLogger("callsentiment.middleware.structured")
    request_logger.addHandler(collector)
    try:
        TestClient(local_app).get("/health")
    finally:
        request_logger.removeHandler(collector)

    json_lines = [message for message in collector.messages if message.startswith("{")]
    assert bool(json_lines) is emits_json
    if emits_json:
        entry = json.loads(json_lines[0])
        assert entry["method"] == "GET"
        assert entry["status_code"] == 200


def test_metrics_exposes_pipeline_counters():
    client = TestClient(app)

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "pipeline_jobs_started_total" in response.text
    assert "pipeline_job_failures_total" in response.text
