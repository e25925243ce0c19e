"""HTTP clients for the MedNav API.

Clients never raise transport failures to callers: they log a warning and
return an empty shape (medication strategy) or fall back to a local store
(price reports).
"""

from app.clients.cache import TTLCache
from app.clients.local_store import LocalPriceReportStore, report_key
from app.clients.medication_strategy import (
    MedicationStrategyClient,
    filter_savings_options_by_insurance,
    format_price,
    format_price_range,
)
from app.clients.price_reports import PriceReportsClient

__all__ = [
    "TTLCache",
    "LocalPriceReportStore",
    "report_key",
    "MedicationStrategyClient",
    "filter_savings_options_by_insurance",
    "format_price",
    "format_price_range",
    "PriceReportsClient",
]
