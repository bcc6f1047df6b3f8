"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten", min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
            ]
        }
    }


class ShortenResponse(BaseModel):
    """Response after shortening a URL."""

    short_code: str = Field(..., description="The generated (or reused) short code")
    short_url: str = Field(..., description="The complete short URL")
    long_url: str = Field(..., description="The original long URL")
    created_at: datetime = Field(..., description="Creation timestamp of the mapping")
    already_existed: bool = Field(..., description="True if the long URL was already shortened")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_code": "abc123",
                    "short_url": "http://localhost:8080/abc123",
                    "long_url": "https://example.com/very/long/path",
                    "created_at": "2024-01-01T12:00:00Z",
                    "already_existed": False,
                }
            ]
        }
    }


class URLInfoResponse(BaseModel):
    """Response with URL mapping information."""

    short_code: str
    long_url: str
    created_at: datetime
    visit_count: int
    last_visited_at: Optional[datetime] = None


class URLListResponse(BaseModel):
    """All stored URL mappings."""

    count: int
    urls: List[URLInfoResponse]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    storage: str = Field(..., description="Storage backend status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
