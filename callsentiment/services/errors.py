"""Error taxonomy for the fulfillment pipeline stages.

Every remote-call wrapper raises a subclass of :class:`PipelineError` so the
pipeline can terminate a job on any of them without special-casing a stage.
"""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base error for a failed pipeline stage, scoped to one contact."""

    stage: str = "unknown"

    def __init__(
        self,
        contact_id: str,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> None:
        self.contact_id = contact_id
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.detail}"


class AuthError(PipelineError):
    """Raised when an InContact API token cannot be obtained."""

    stage = "token"


class FetchError(PipelineError):
    """Raised when a recording cannot be fetched from InContact."""

    stage = "fetch"


class DeleteError(PipelineError):
    """Raised when a recording cannot be removed from InContact."""

    stage = "delete"


class TranscriptionError(PipelineError):
    """Raised when speech-to-text returns no usable transcript."""

    stage = "transcribe"


class AnalysisError(PipelineError):
    """Raised when sentiment analysis returns no document sentiment."""

    stage = "analyze"


class StoreError(PipelineError):
    """Raised when one of the job artifacts cannot be written."""

    stage = "persist"

    def __init__(
        self,
        contact_id: str,
        detail: str,
        *,
        object_key: str,
        status_code: int | None = None,
    ) -> None:
        self.object_key = object_key
        super().__init__(contact_id, detail, status_code=status_code)

    def __str__(self) -> str:
        return f"{type(self).__name__}: {self.object_key}: {self.detail}"


__all__ = [
    "PipelineError",
    "AuthError",
    "FetchError",
    "DeleteError",
    "TranscriptionError",
    "AnalysisError",
    "StoreError",
]
