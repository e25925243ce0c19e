"""Medication strategy endpoints.

GET /medication-strategy                        - all active strategies (summary)
GET /medication-strategy?medicationId=ozempic   - one strategy with details

medicationId may be the id, the generic name or the brand name (any case).

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Query
from fastapi.responses import Response

from app.cors import preflight_response
from app.schemas import StrategyListResponse, StrategyResponse
from app.services.medication_strategy import get_strategy, list_strategies

router = APIRouter()

ALLOWED_METHODS = "GET, OPTIONS"


@router.get("")
async def get_medication_strategy(
    medication_id: str | None = Query(
        default=None,
        alias="medicationId",
        max_length=200,
        description="Medication id, generic name or brand name (case-insensitive)",
        examples=["ozempic", "Semaglutide"],
    ),
) -> StrategyResponse | StrategyListResponse:
    """Get one medication strategy, or the summary of all of them.

    Returns:
        StrategyResponse when medicationId is given (strategy is null if unknown),
        otherwise StrategyListResponse.
    """
    if medication_id and medication_id.strip():
        return await get_strategy(medication_id)

    return await list_strategies()


@router.options("")
async def medication_strategy_preflight() -> Response:
    """CORS preflight."""
    return preflight_response(ALLOWED_METHODS)
