"""
CNVTBOT API Response Schemas
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response for /api/v1/health"""
    status: str = Field(description="Service health status")
    version: str = Field(description="API version")
    database: str = Field(description="Database connection status")
    provider: str = Field(description="Rate provider name")
    provider_status: str = Field(description="Rate provider reachability")
    today: str = Field(description="Local calendar date")
    snapshot_date: str | None = Field(
        default=None,
        description="Date of the snapshot currently served"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "database": "connected",
                "provider": "fixer",
                "provider_status": "reachable",
                "today": "2026-01-15",
                "snapshot_date": "2026-01-15"
            }
        }
    }


class RatesResponse(BaseModel):
    """Response schema for /api/v1/rates/today"""
    date: str
    base: str
    symbols: list[str] = Field(description="Convertible currency codes, sorted")
    rates: dict[str, str] = Field(description="Units of code per 1 base, exact decimal strings")


class ErrorDetail(BaseModel):
    """Error detail information."""
    code: str = Field(description="Error code")
    message: str = Field(description="Human-readable error message")
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details"
    )
    timestamp: datetime = Field(description="Error timestamp")


class ErrorResponse(BaseModel):
    error: ErrorDetail
