# This file defines response schemas for health, version, and service index endpoints.
# It exists to keep operational status contracts explicit for platform consumers.
# Health responses use the same status envelope as resource endpoints.

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["success", "error"]
    message: str
    environment: str
    database: str
    timestamp: datetime


class VersionData(BaseModel):
    project: str
    version: str
    api_prefix: str
    environment: str


class VersionResponse(BaseModel):
    status: Literal["success"] = "success"
    data: VersionData


class ServiceIndexResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
    version: str
    documentation: dict[str, str]
