"""Pydantic models for the uniform JSON response envelope."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class ErrorBody(StrictModel):
    """Error payload; ``stack`` is only populated in development."""

    message: str
    stack: str | None = None


class ErrorEnvelope(StrictModel):
    """Failure envelope shared by every endpoint."""

    success: bool = False
    error: ErrorBody


class MessageEnvelope(StrictModel):
    """Success envelope carrying only a human-readable message."""

    success: bool = True
    message: str
