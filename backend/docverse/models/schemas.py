"""
Pydantic models for API responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str


class EncryptionStatusResponse(BaseModel):
    """Whether an uploaded PDF is password protected."""

    encrypted: bool


class ServiceStatus(BaseModel):
    name: str
    healthy: bool
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = Field(description="healthy | degraded")
    version: str
    environment: str
    cloud_engine: str = Field(description="enabled | configured | disabled")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    services: dict[str, bool] = Field(default_factory=dict)
    details: list[ServiceStatus] = Field(default_factory=list)
