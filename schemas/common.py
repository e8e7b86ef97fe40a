"""
schemas/common.py

- Shared response schemas (Pydantic v2)
- Contents: error response standard (ErrorDetail, ErrorResponse)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) Error response standard
# =========================================================

class ErrorDetail(BaseModel):
    """Smallest unit of an error: code + message"""
    code: str = Field(..., description="Error code (e.g. INVALID_INPUT, UPSTREAM_UNAVAILABLE)")
    message: str = Field(..., description="Human readable message")

class ErrorResponse(BaseModel):
    """
    Error body returned by the global handlers in middlewares/error_handler.py
    - keeps "nothing to show" (200, empty data) apart from "could not fetch" (503)
    """
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response creation time (UTC)"
    )
    latency_ms: Optional[int] = Field(
        default=None, ge=0, description="Processing time in ms, when known"
    )

    model_config = ConfigDict(extra="ignore")
