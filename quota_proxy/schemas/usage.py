"""Pydantic schemas for the usage query endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class UsageSnapshotResponse(BaseModel):
    """Optimistic quota snapshot.

    This is not read from the usage store; enforcement happens on the
    messages endpoint only.
    """

    uses_remaining: int = Field(
        ..., description="Uses assumed to be left (always the full quota)."
    )
    reset_time_hours: float = Field(
        ..., description="Hours until reset (always 0 for this snapshot)."
    )
    note: str = Field(
        ..., description="Explains that real tracking happens per proxied request."
    )
