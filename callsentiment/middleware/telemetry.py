"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from callsentiment.telemetry import observe_request

_UNINSTRUMENTED_PATHS = frozenset({"/metrics"})


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request metrics for Prometheus, skipping the scrape endpoint."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in _UNINSTRUMENTED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        method = request.method

        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover
            observe_request(
                method, self._resolve_route(request), 500, time.perf_counter() - start_time
            )
            raise

        observe_request(
            method,
            self._resolve_route(request),
            response.status_code,
            time.perf_counter() - start_time,
        )
        return response

    @staticmethod
    def _resolve_route(request: Request) -> str:
        """Return the matched route pattern, or the raw path when unmatched."""

        scope_route: Any = request.scope.get("route")
        path = getattr(scope_route, "path", None)
        return path or request.url.path
