"""Pydantic schemas used as views in the MVC architecture."""

from .recordings import RecordingNotification

__all__ = ["RecordingNotification"]
