"""
Leisure Catalog API — Pydantic Response Schemas
================================================

What:  Pydantic models describing what the API returns.
Why:   Response serialization and OpenAPI doc generation.

Only the show summary and the health report have a fixed shape. Genre
listings are plain string arrays, and show detail rows are passed through
with whatever columns `tv_shows` holds.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class ShowSummary(BaseModel):
    """
    What:  One entry of GET /api/genre/{genre}.
    Why:   The listing query selects exactly tvid and name.
    """
    tvid: Union[int, str] = Field(description="Opaque show identifier")
    name: Optional[str] = Field(default=None, description="Display name")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    What:  Error body for every failing endpoint.

    Examples:
        {"error": "tvid t99 is not found"}
        {"error": {"type": "OperationalError", "errno": 2003, "message": "...", "sql": "..."}}
    """
    error: Any = Field(description="Message string, or the serialized database error")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
