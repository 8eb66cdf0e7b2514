"""
Daymare Backend: Article Schemas
=================================

What:  Pydantic models for the stored article and for each endpoint's body.
How:   ``Article`` is what the API returns and what the store persists.
       ``ArticleCreate`` and ``ArticleUpdate`` describe the request bodies of
       the create and update endpoints, with explicit required/optional
       fields; anything undeclared is rejected instead of silently dropped.
Who:   Used by the route handlers and by ``ArticleStore``.

Wire shape:
    {"id": "65f0c0ffee...", "title": "...", "body": "...",
     "ctime": "2024-01-15T12:00:00.123000Z"}
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Article(BaseModel):
    """
    A blog post as stored and served.

    ``id`` and ``ctime`` are assigned by the create handler, never by the
    client, and do not change afterwards.
    """

    id: str = Field(description="Store-assigned identifier (24 hex chars)")
    title: str = Field(default="", description="Article title")
    body: str = Field(description="Article body (markdown)")
    ctime: datetime = Field(description="Creation time (UTC, RFC 3339)")


class ArticleCreate(BaseModel):
    """
    Body of ``POST /api/save``.

    ``id`` and ``ctime`` are tolerated because clients commonly echo a whole
    article back, but their values are discarded by the handler. Any other
    unknown field is an error.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = ""
    body: str
    id: Optional[Any] = Field(default=None, exclude=True)
    ctime: Optional[Any] = Field(default=None, exclude=True)


class ArticleUpdate(BaseModel):
    """Body of ``PUT /api/article/{id}``: both fields replace the stored ones."""

    model_config = ConfigDict(extra="forbid")

    title: str
    body: str


class HealthResponse(BaseModel):
    """Returned by ``GET /health``."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MongoDB connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
