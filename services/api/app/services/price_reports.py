"""Price report reads, writes and statistics.

Reads:
- Per (medication, source): last 50 reports + stats computed in Python
- Bulk: per-(medication, source) aggregates computed by Postgres

Writes:
- Single-row append after validation (no updates, no deletes)

The ip_hash stored with a report is a truncated SHA-256 of the first
X-Forwarded-For address. It is persisted for later rate limiting but nothing
reads it today; submissions are never throttled.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
import hashlib
import logging
from typing import Any

from sqlalchemy import Numeric, func, select

from app.models import PriceReport
from app.schemas import (
    AggregateStat,
    PriceReportCreate,
    PriceReportDetailResponse,
    PriceReportOut,
    PriceStats,
)
from app.services.price_stats import (
    MAX_REPORTS_PER_PAIR,
    RECENT_WINDOW,
    PriceObservation,
    compute_price_stats,
    to_valid_price,
)
from app.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

IP_HASH_LENGTH = 16


class PriceReportValidationError(ValueError):
    """Raised when a submitted report is missing fields or has a bad price."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def _is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)):
        return value == 0
    return False


def validate_price_report(payload: PriceReportCreate) -> Decimal:
    """Validate a submission and return the price rounded to cents.

    Raises:
        PriceReportValidationError: MISSING_FIELDS or INVALID_PRICE.
    """
    if _is_blank(payload.medication_id) or _is_blank(payload.source) or _is_blank(payload.price):
        raise PriceReportValidationError(
            "MISSING_FIELDS",
            "Missing required fields: medicationId, source, price",
        )

    price = to_valid_price(payload.price)
    if price is None:
        raise PriceReportValidationError("INVALID_PRICE", "Invalid price value")
    return price


def hash_client_address(forwarded_for: str | None) -> str | None:
    """Hash the first address of an X-Forwarded-For header (truncated)."""
    if not forwarded_for:
        return None
    address = forwarded_for.split(",")[0].strip()
    if not address:
        return None
    return hashlib.sha256(address.encode()).hexdigest()[:IP_HASH_LENGTH]


async def get_price_report_detail(
    medication_id: str,
    source: str,
    *,
    now: datetime | None = None,
) -> PriceReportDetailResponse:
    """Get the most recent reports and their stats for one (medication, source).

    Args:
        medication_id: Medication identifier as reported.
        source: Pharmacy or program the price was observed at.
        now: Reference time for the 90-day window (defaults to current UTC time).

    Returns:
        PriceReportDetailResponse; stats is None when there are no reports.
    """
    async with get_session() as session:
        result = await session.execute(
            select(PriceReport)
            .where(PriceReport.medication_id == medication_id)
            .where(PriceReport.source == source)
            .order_by(PriceReport.created_at.desc())
            .limit(MAX_REPORTS_PER_PAIR)
        )
        rows = result.scalars().all()

    if not rows:
        return PriceReportDetailResponse(stats=None, reports=[])

    stats = compute_price_stats(
        [PriceObservation(price=r.price, observed_at=r.created_at) for r in rows],
        now=now,
    )
    return PriceReportDetailResponse(
        stats=PriceStats(**stats),
        reports=[PriceReportOut.model_validate(r) for r in rows],
    )


async def get_aggregate_price_stats(*, now: datetime | None = None) -> list[AggregateStat]:
    """Get per-(medication, source) statistics across all reports.

    recent_reports counts rows created after now - RECENT_WINDOW; the cutoff
    is bound as a parameter.
    """
    recent_cutoff = (now or datetime.now(timezone.utc)) - RECENT_WINDOW
    query = (
        select(
            PriceReport.medication_id,
            PriceReport.source,
            func.min(PriceReport.price).label("min_price"),
            func.max(PriceReport.price).label("max_price"),
            func.round(func.avg(PriceReport.price).cast(Numeric), 2).label("avg_price"),
            func.count().label("total_reports"),
            func.count().filter(PriceReport.created_at > recent_cutoff).label("recent_reports"),
        )
        .group_by(PriceReport.medication_id, PriceReport.source)
        .order_by(PriceReport.medication_id, PriceReport.source)
    )

    async with get_session() as session:
        result = await session.execute(query)
        rows = result.mappings().all()

    return [
        AggregateStat(
            medication_id=row["medication_id"],
            source=row["source"],
            min_price=float(row["min_price"]),
            max_price=float(row["max_price"]),
            avg_price=float(row["avg_price"]),
            total_reports=int(row["total_reports"]),
            recent_reports=int(row["recent_reports"] or 0),
        )
        for row in rows
    ]


async def create_price_report(
    payload: PriceReportCreate,
    *,
    forwarded_for: str | None = None,
) -> None:
    """Validate and append one price report.

    Raises:
        PriceReportValidationError: If required fields are missing or price is invalid.
    """
    price = validate_price_report(payload)
    report = PriceReport(
        medication_id=payload.medication_id.strip(),
        source=payload.source.strip(),
        price=price,
        location=payload.location,
        report_date=payload.report_date,
        ip_hash=hash_client_address(forwarded_for),
    )

    async with get_session() as session:
        session.add(report)

    logger.info(f"Price report stored: {report.medication_id}/{report.source} ${price:.2f}")
