"""
Request/response models for the HTTP API.

These are thin Pydantic wrappers around :class:`ExpandResult`; they exist so
that FastAPI can validate input and publish an OpenAPI schema.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from ristream.core.settings import MAX_REPLAY_DEPTH_LIMIT


class ExpandRequest(BaseModel):
    """Body of ``POST /expand``."""

    rib: str = Field(description="ASCII RIB text to expand.")
    capture_archive_records: bool | None = Field(
        default=None,
        description="Keep comments inside archive/object definitions (server default if omitted).",
    )
    max_replay_depth: int | None = Field(
        default=None,
        ge=1,
        le=MAX_REPLAY_DEPTH_LIMIT,
        description="Limit on nested replays (server default if omitted).",
    )


class ErrorPayload(BaseModel):
    code: str
    severity: str
    message: str


class StreamInfo(BaseModel):
    name: str
    commands: int


class ExpandResponse(BaseModel):
    """Body returned by ``POST /expand``."""

    rib: str
    requests: int
    errors: list[ErrorPayload] = Field(default_factory=list)
    archives: list[StreamInfo] = Field(default_factory=list)
    objects: list[StreamInfo] = Field(default_factory=list)
