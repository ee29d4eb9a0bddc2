"""Pydantic models shared by the FastAPI endpoints."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

Theme = Literal["light", "dark"]


class GenerationRequest(BaseModel):
    # Optional so a missing prompt reaches the service and yields the 400 contract.
    prompt: Optional[str] = Field(default=None, description="Text prompt for image generation")


class GenerationResponse(BaseModel):
    imageUrl: str = Field(..., description="Raw base64-encoded PNG body, without a data-URI prefix")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="User-facing error message")


class ThemeRequest(BaseModel):
    theme: Theme


class ThemeResponse(BaseModel):
    theme: Theme


class HealthResponse(BaseModel):
    status: str
    imageModel: str
    credentialConfigured: bool
