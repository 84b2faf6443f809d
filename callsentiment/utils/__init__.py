"""Utility helpers for the call sentiment service."""

from .logging import job_context

__all__ = ["job_context"]
