"""Schemas for the price reports endpoint (/price-reports)."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class PriceStats(BaseModel):
    """Derived statistics for one (medication, source) pair.

    Prices are strings with two decimals ("10.00"); `count` only includes
    reports from the last 90 days, `total` includes all of them.
    """

    min: str
    max: str
    avg: str
    count: int = Field(ge=0)
    total: int = Field(ge=0)


class PriceReportOut(BaseModel):
    """A single stored report."""

    price: float
    location: str | None = None
    report_date: date | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class PriceReportDetailResponse(BaseModel):
    """Response for GET /price-reports?medicationId=...&source=..."""

    stats: PriceStats | None = None
    reports: list[PriceReportOut] = Field(default_factory=list, max_length=50)


class AggregateStat(BaseModel):
    """Database-computed statistics row for one (medication, source) pair."""

    medication_id: str
    source: str
    min_price: float
    max_price: float
    avg_price: float
    total_reports: int
    recent_reports: int


class AggregateStatsResponse(BaseModel):
    """Response for GET /price-reports (bulk)."""

    stats: list[AggregateStat] = Field(default_factory=list)


class PriceReportCreate(BaseModel):
    """Request body for POST /price-reports.

    Fields are loosely typed on purpose: missing or malformed values are
    reported by the service with specific error codes instead of a generic
    validation error.
    """

    medication_id: str | None = Field(alias="medicationId", default=None)
    source: str | None = None
    price: Any = None
    location: str | None = None
    report_date: date | None = Field(alias="date", default=None)

    model_config = {"populate_by_name": True}

    @field_validator("location", "report_date", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PriceReportCreated(BaseModel):
    """Response for a successful POST /price-reports."""

    success: bool = True
    message: str = "Price report submitted"
