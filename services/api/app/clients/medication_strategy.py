"""Medication strategy API client.

Fetches savings strategies, pharmacy availability and retail pricing from
GET /medication-strategy. Single-medication lookups are cached in memory
(default 5 minutes) to avoid repeated round-trips.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import httpx

from app.clients.cache import TTLCache
from app.error_logger import log_warning
from app.settings import get_settings

API_PATH = "/medication-strategy"
COMPONENT = "MedicationStrategyClient"


def empty_strategy() -> dict[str, Any]:
    return {"strategy": None, "pharmacies": {}}


def empty_strategy_list() -> dict[str, Any]:
    return {"strategies": [], "pharmacyAvailability": {}}


class MedicationStrategyClient:
    """Client for the medication strategy endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        cache: TTLCache[dict[str, Any]] | None = None,
        timeout: float | None = None,
    ):
        """Initialize client.

        Args:
            base_url: API base URL (defaults to settings.api_base_url).
            http_client: Pre-built client (e.g. with a mock transport); not closed by close().
            cache: Strategy cache (defaults to a TTLCache with settings.strategy_cache_ttl_seconds).
            timeout: Request timeout in seconds (defaults to settings.client_timeout_seconds).
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.client_timeout_seconds
        self.cache = cache if cache is not None else TTLCache(settings.strategy_cache_ttl_seconds)
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def url(self) -> str:
        return f"{self.base_url}{API_PATH}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client (only if created here)."""
        if self._http_client and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_medication_strategy(self, medication_id: str) -> dict[str, Any]:
        """Fetch the strategy for one medication (cached).

        Returns:
            {"strategy": {...} | None, "pharmacies": {name: {...}}}. Failures return
            the empty shape and are not cached.
        """
        cached = self.cache.get(medication_id)
        if cached is not None:
            return cached

        client = await self._get_client()
        try:
            resp = await client.get(self.url, params={"medicationId": medication_id})
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log_warning(
                f"Could not fetch medication strategy: {e}",
                component=COMPONENT,
                extra={"medication_id": medication_id},
            )
            return empty_strategy()

        self.cache.set(medication_id, data)
        return data

    async def fetch_all_medication_strategies(self) -> dict[str, Any]:
        """Fetch all strategies (summary) and pharmacy availability. Not cached."""
        client = await self._get_client()
        try:
            resp = await client.get(self.url)
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log_warning(f"Could not fetch medication strategies: {e}", component=COMPONENT)
            return empty_strategy_list()

    async def check_pharmacy_availability(self, medication_id: str, pharmacy: str) -> dict[str, Any] | None:
        """Availability of a medication at one pharmacy, or None if unknown."""
        data = await self.fetch_medication_strategy(medication_id)
        return (data.get("pharmacies") or {}).get(pharmacy)

    def clear_cache(self) -> None:
        """Drop all cached strategies (call after data updates)."""
        self.cache.clear()


def filter_savings_options_by_insurance(
    savings_options: list[dict[str, Any]] | None,
    insurance_type: str | None,
) -> list[dict[str, Any]] | None:
    """Keep options usable with the given insurance type.

    insurance_type: "commercial", "medicare", "medicaid" or "uninsured".
    Options without insurance_types apply to everyone. Without options or a
    type, the input is returned unchanged.
    """
    if not savings_options or not insurance_type:
        return savings_options

    return [
        option
        for option in savings_options
        if not option.get("insurance_types") or insurance_type in option["insurance_types"]
    ]


def format_price(cents: int | None) -> str | None:
    """Format cents as whole dollars ("$25"); 0 is "FREE"."""
    if cents is None:
        return None
    if cents == 0:
        return "FREE"
    dollars = (Decimal(cents) / 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"${dollars}"


def format_price_range(low_cents: int | None, high_cents: int | None) -> str | None:
    """Format a price range ("$25-$100"); equal or missing ends collapse to one value."""
    if not low_cents and not high_cents:
        return None
    low = format_price(low_cents)
    high = format_price(high_cents)
    if low is None or high is None or low == high:
        return low or high
    return f"{low}-{high}"
