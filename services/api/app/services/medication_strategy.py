"""Medication strategy lookups.

Identifier resolution:
1. Normalize the incoming identifier (trim + lower-case)
2. Match it against medication_id, generic_name and brand_name of active strategies
3. Return the canonical medication_id; every dependent query uses that id

An unknown identifier is not an error: callers get an empty StrategyResponse.
"""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import MedicationStrategy, PharmacyAvailability, SavingsOption
from app.schemas import (
    PharmacyInfo,
    SavingsOptionOut,
    StrategyDetail,
    StrategyListResponse,
    StrategyResponse,
    StrategySummary,
)
from app.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

# Columns an identifier may match (case-insensitive), in preference order
IDENTIFIER_COLUMNS = (
    MedicationStrategy.medication_id,
    MedicationStrategy.generic_name,
    MedicationStrategy.brand_name,
)


def normalize_identifier(identifier: str | None) -> str | None:
    """Trim and lower-case an identifier; blank input yields None."""
    if identifier is None:
        return None
    normalized = identifier.strip().lower()
    return normalized or None


def build_pharmacy_map(rows: Iterable[Any]) -> dict[str, PharmacyInfo]:
    """Key pharmacy availability rows by pharmacy name.

    One entry per distinct pharmacy; a later row for the same pharmacy wins.
    """
    pharmacies: dict[str, PharmacyInfo] = {}
    for row in rows:
        pharmacies[row.pharmacy] = PharmacyInfo(
            available=bool(row.is_available),
            price_cents=row.price_cents,
            price_note=row.price_note,
            url=row.url,
        )
    return pharmacies


def group_pharmacy_availability(rows: Iterable[Any]) -> dict[str, dict[str, bool]]:
    """Group (medication_id, pharmacy, is_available) rows by medication."""
    grouped: dict[str, dict[str, bool]] = {}
    for row in rows:
        grouped.setdefault(row.medication_id, {})[row.pharmacy] = bool(row.is_available)
    return grouped


async def resolve_medication_id(session: AsyncSession, identifier: str | None) -> str | None:
    """Resolve an id, generic name or brand name to the canonical medication_id.

    Args:
        session: Open database session.
        identifier: Raw identifier from the request (any case).

    Returns:
        Canonical medication_id of an active strategy, or None if nothing matches.
    """
    needle = normalize_identifier(identifier)
    if needle is None:
        return None

    query = (
        select(MedicationStrategy.medication_id)
        .where(MedicationStrategy.is_active.is_(True))
        .where(or_(*(func.lower(column) == needle for column in IDENTIFIER_COLUMNS)))
        # An exact id match beats a name match on another row
        .order_by(
            case((func.lower(MedicationStrategy.medication_id) == needle, 0), else_=1),
            MedicationStrategy.medication_id,
        )
        .limit(1)
    )
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_strategy(identifier: str) -> StrategyResponse:
    """Get the full strategy for one medication.

    Returns:
        StrategyResponse with savings options (priority DESC) and pharmacies keyed
        by name, or an empty StrategyResponse if the identifier is unknown.
    """
    async with get_session() as session:
        medication_id = await resolve_medication_id(session, identifier)
        if medication_id is None:
            logger.info(f"No active medication strategy matches {identifier!r}")
            return StrategyResponse()

        strategy_result = await session.execute(
            select(MedicationStrategy)
            .where(MedicationStrategy.medication_id == medication_id)
            .where(MedicationStrategy.is_active.is_(True))
        )
        strategy = strategy_result.scalar_one_or_none()
        if strategy is None:
            return StrategyResponse()

        options_result = await session.execute(
            select(SavingsOption)
            .where(SavingsOption.medication_id == medication_id)
            .where(SavingsOption.is_active.is_(True))
            .order_by(SavingsOption.priority.desc(), SavingsOption.id.asc())
        )
        savings_options = [SavingsOptionOut.model_validate(o) for o in options_result.scalars().all()]

        pharmacy_result = await session.execute(
            select(PharmacyAvailability)
            .where(PharmacyAvailability.medication_id == medication_id)
            .order_by(PharmacyAvailability.id.asc())
        )
        pharmacies = build_pharmacy_map(pharmacy_result.scalars().all())

        detail = StrategyDetail(
            medication_id=strategy.medication_id,
            generic_name=strategy.generic_name,
            brand_name=strategy.brand_name,
            category=strategy.category,
            condition=strategy.condition,
            retail_price_low=strategy.retail_price_low,
            retail_price_high=strategy.retail_price_high,
            retail_price_note=strategy.retail_price_note,
            common_mistakes=strategy.common_mistakes,
            savings_options=savings_options,
        )
        return StrategyResponse(strategy=detail, pharmacies=pharmacies)


async def list_strategies() -> StrategyListResponse:
    """Get all active strategies (summary) plus pharmacy availability by medication."""
    async with get_session() as session:
        strategies_result = await session.execute(
            select(MedicationStrategy)
            .where(MedicationStrategy.is_active.is_(True))
            .order_by(MedicationStrategy.brand_name)
        )
        strategies = [StrategySummary.model_validate(s) for s in strategies_result.scalars().all()]

        pharmacy_result = await session.execute(
            select(
                PharmacyAvailability.medication_id,
                PharmacyAvailability.pharmacy,
                PharmacyAvailability.is_available,
            ).order_by(PharmacyAvailability.id.asc())
        )
        availability = group_pharmacy_availability(pharmacy_result.all())

        return StrategyListResponse(strategies=strategies, pharmacy_availability=availability)
