"""Price report endpoints.

GET  /price-reports?medicationId=...&source=...  - last 50 reports + stats
GET  /price-reports                              - aggregate stats for every pair
POST /price-reports                              - submit a report

Validation failures return 400 with a structured error:
- MISSING_FIELDS: medicationId, source or price missing
- INVALID_PRICE: price not a number, <= 0 or > 100000
"""

from fastapi import APIRouter, Header, HTTPException, Query
from fastapi.responses import Response

from app.cors import preflight_response
from app.schemas import (
    AggregateStatsResponse,
    ErrorDetail,
    PriceReportCreate,
    PriceReportCreated,
    PriceReportDetailResponse,
)
from app.services.price_reports import (
    PriceReportValidationError,
    create_price_report,
    get_aggregate_price_stats,
    get_price_report_detail,
)

router = APIRouter()

ALLOWED_METHODS = "GET, POST, OPTIONS"


@router.get("")
async def get_price_reports(
    medication_id: str | None = Query(default=None, alias="medicationId", max_length=200),
    source: str | None = Query(default=None, max_length=200),
) -> PriceReportDetailResponse | AggregateStatsResponse:
    """Get reports for one (medication, source) pair, or aggregate stats for all pairs."""
    if medication_id and source:
        return await get_price_report_detail(medication_id, source)

    stats = await get_aggregate_price_stats()
    return AggregateStatsResponse(stats=stats)


@router.post("", status_code=201, response_model=PriceReportCreated)
async def submit_price_report(
    payload: PriceReportCreate | None = None,
    x_forwarded_for: str | None = Header(default=None),
) -> PriceReportCreated:
    """Submit a crowd-sourced price report.

    Raises:
        HTTPException 400: Missing fields or invalid price.
    """
    try:
        await create_price_report(payload or PriceReportCreate(), forwarded_for=x_forwarded_for)
    except PriceReportValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=ErrorDetail(code=e.code, message=e.message).model_dump(),
        )

    return PriceReportCreated()


@router.options("")
async def price_reports_preflight() -> Response:
    """CORS preflight."""
    return preflight_response(ALLOWED_METHODS)
