"""API routes."""

from fastapi import APIRouter

from app.routes import medication_strategy, price_reports

api_router = APIRouter()

# Medication strategy lookups (by id / generic name / brand name)
api_router.include_router(
    medication_strategy.router,
    prefix="/medication-strategy",
    tags=["medication-strategy"],
)

# Crowd-sourced price reports
api_router.include_router(price_reports.router, prefix="/price-reports", tags=["price-reports"])

# Methods each endpoint answers; used for CORS preflights
ENDPOINT_METHODS = {
    "/medication-strategy": medication_strategy.ALLOWED_METHODS,
    "/price-reports": price_reports.ALLOWED_METHODS,
}
