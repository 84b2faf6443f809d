"""Helpers for tagging log records with the job they belong to."""

from __future__ import annotations


def job_context(contact_id: str, stage: str) -> dict[str, str]:
    """Return the ``extra`` mapping that tags a record with contact and stage."""

    return {"contact_id": contact_id, "stage": stage}


__all__ = ["job_context"]
