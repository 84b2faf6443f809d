"""Service layer helpers for external integrations."""

from .errors import (
    AnalysisError,
    AuthError,
    DeleteError,
    FetchError,
    PipelineError,
    StoreError,
    TranscriptionError,
)
from .incontact import AuthToken, RecordingClient, TokenProvider
from .sentiment import SentimentClient, SentimentResult
from .storage import Artifact, ArtifactSet, ArtifactStore, create_s3_client
from .transcribe import TranscriptionClient

__all__ = [
    "PipelineError",
    "AuthError",
    "FetchError",
    "DeleteError",
    "TranscriptionError",
    "AnalysisError",
    "StoreError",
    "AuthToken",
    "TokenProvider",
    "RecordingClient",
    "TranscriptionClient",
    "SentimentClient",
    "SentimentResult",
    "Artifact",
    "ArtifactSet",
    "ArtifactStore",
    "create_s3_client",
]
