"""Pydantic schemas for API request/response validation."""

from app.schemas.common import ErrorDetail, ErrorResponse
from app.schemas.medication_strategy import (
    PharmacyInfo,
    SavingsOptionOut,
    StrategyDetail,
    StrategyListResponse,
    StrategyResponse,
    StrategySummary,
)
from app.schemas.price_reports import (
    AggregateStat,
    AggregateStatsResponse,
    PriceReportCreate,
    PriceReportCreated,
    PriceReportDetailResponse,
    PriceReportOut,
    PriceStats,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "PharmacyInfo",
    "SavingsOptionOut",
    "StrategyDetail",
    "StrategyListResponse",
    "StrategyResponse",
    "StrategySummary",
    "AggregateStat",
    "AggregateStatsResponse",
    "PriceReportCreate",
    "PriceReportCreated",
    "PriceReportDetailResponse",
    "PriceReportOut",
    "PriceStats",
]
