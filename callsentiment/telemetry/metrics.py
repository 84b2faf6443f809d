"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

from callsentiment.pipelines.fulfillment.types import JobState, Transition

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

JOBS_STARTED = Counter(
    "pipeline_jobs_started_total",
    "Recording notifications accepted for fulfillment",
)

JOBS_IN_PROGRESS = Gauge(
    "pipeline_jobs_in_progress",
    "Fulfillment jobs that have not reached a terminal state",
)

STAGE_TRANSITIONS = Counter(
    "pipeline_state_transitions_total",
    "Job state transitions observed by the fulfillment pipeline",
    ("state",),
)

JOB_FAILURES = Counter(
    "pipeline_job_failures_total",
    "Fulfillment jobs that ended in FAILED, by failing stage",
    ("stage",),
)

JOB_DURATION = Histogram(
    "pipeline_job_duration_seconds",
    "Wall time from notification to terminal state",
    ("outcome",),
    buckets=(1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_transition(transition: Transition) -> None:
    """Pipeline listener that mirrors job state changes into metrics."""

    STAGE_TRANSITIONS.labels(state=transition.state.value).inc()

    if transition.state is JobState.RECEIVED:
        JOBS_STARTED.inc()
        JOBS_IN_PROGRESS.inc()
        return

    if not transition.state.terminal:
        return

    JOBS_IN_PROGRESS.dec()
    if transition.state is JobState.FAILED:
        stage = transition.stage.value if transition.stage else "unknown"
        JOB_FAILURES.labels(stage=stage).inc()
        JOB_DURATION.labels(outcome="failed").observe(transition.elapsed)
    else:
        JOB_DURATION.labels(outcome="completed").observe(transition.elapsed)
