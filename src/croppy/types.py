"""Shared Pydantic models for croppy."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field

# ── Enums ──


class Outcome(StrEnum):
    PASS_THROUGH = "pass_through"
    REDIRECT = "redirect"
    STREAM = "stream"


class Quadrant(StrEnum):
    TOP = "T"
    BOTTOM = "B"
    LEFT = "L"
    RIGHT = "R"
    CENTER = "C"


# ── Request / result models ──


class TransformRequest(BaseModel):
    """A decoded derivative request.

    ``options`` keeps the order the options appeared in the URL so the request
    re-encodes to the same path.
    """

    source_path: str
    width: int | None = None
    height: int | None = None
    options: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def is_pass_through(self) -> bool:
        return self.width is None and self.height is None

    def option(self, name: str, default: list[str] | None = None) -> list[str] | None:
        return self.options.get(name, default)


class ProcessorConfig(BaseModel):
    """Output parameters handed to the image processor."""

    jpeg_quality: int = 95
    interlace: bool = True
    upscale: bool = False


class Derivative(BaseModel):
    """Handle to a materialized derivative in the crops store."""

    key: str
    source_path: str
    size_bytes: int = 0
    cached: bool = False


class Delivery(BaseModel):
    """Terminal outcome of one handled request, framework agnostic."""

    outcome: Outcome
    status: int = 200
    headers: dict[str, str] = Field(default_factory=dict)
    location: str | None = None
    file_path: Path | None = None
    body: bytes = b""

    @property
    def content_type(self) -> str | None:
        return self.headers.get("Content-Type")
