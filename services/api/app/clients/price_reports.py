"""Price reports API client.

Talks to /price-reports. When the API is unavailable (transport error or
5xx) it falls back to a LocalPriceReportStore so reports are not lost and
stats still render offline.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import httpx

from app.clients.local_store import LocalPriceReportStore, report_key
from app.error_logger import log_warning
from app.services.price_stats import format_amount
from app.settings import get_settings

API_PATH = "/price-reports"
COMPONENT = "PriceReportsClient"


def _error_message(resp: httpx.Response) -> str:
    """Extract the structured error message from an API error response."""
    try:
        return str(resp.json()["error"]["message"])
    except (ValueError, KeyError, TypeError):
        return f"API error: {resp.status_code}"


class PriceReportsClient:
    """Client for the price reports endpoint with a local fallback store."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        store: LocalPriceReportStore | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.client_timeout_seconds
        self.store = store if store is not None else LocalPriceReportStore(settings.local_price_store_path)
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

    async def fetch_price_stats(self, medication_id: str, source: str) -> dict[str, Any] | None:
        """Stats for one (medication, source); local stats if the API fails."""
        client = await self._get_client()
        try:
            resp = await client.get(self.url, params={"medicationId": medication_id, "source": source})
            resp.raise_for_status()
            return resp.json().get("stats")
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            log_warning(f"API unavailable, falling back to local store: {e}", component=COMPONENT)
            return self.store.get_stats(medication_id, source)

    async def submit_price_report(
        self,
        medication_id: str,
        source: str,
        price: float | str,
        location: str | None = None,
        report_date: date | str | None = None,
    ) -> dict[str, Any]:
        """Submit a report.

        Returns:
            {"success": True} when accepted. A 4xx rejection returns
            {"success": False, "error": message} and is not stored locally.
            Transport failures and 5xx store the report locally instead.
        """
        body = {
            "medicationId": medication_id,
            "source": source,
            "price": price,
            "location": location,
            "date": report_date.isoformat() if isinstance(report_date, date) else report_date,
        }

        client = await self._get_client()
        try:
            resp = await client.post(self.url, json=body)
        except httpx.HTTPError as e:
            log_warning(f"API unavailable, saving to local store: {e}", component=COMPONENT)
            return self.store.add_report(medication_id, source, price, location, report_date)

        if resp.is_success:
            return {"success": True}

        message = _error_message(resp)
        if resp.is_client_error:
            log_warning(f"Price report rejected: {message}", component=COMPONENT, extra=body)
            return {"success": False, "error": message}

        log_warning(f"API error {resp.status_code}, saving to local store: {message}", component=COMPONENT)
        return self.store.add_report(medication_id, source, price, location, report_date)

    async def fetch_all_price_stats(self) -> dict[str, dict[str, Any]]:
        """Stats for every (medication, source), keyed "{medicationId}_{source}"."""
        client = await self._get_client()
        try:
            resp = await client.get(self.url)
            resp.raise_for_status()
            rows = resp.json()["stats"]
            return {
                report_key(row["medication_id"], row["source"]): {
                    "min": format_amount(row["min_price"]),
                    "max": format_amount(row["max_price"]),
                    "avg": format_amount(row["avg_price"]),
                    "count": int(row["recent_reports"]),
                    "total": int(row["total_reports"]),
                }
                for row in rows
            }
        except (httpx.HTTPError, ValueError, KeyError, TypeError, ArithmeticError) as e:
            log_warning(f"API unavailable, using local store: {e}", component=COMPONENT)
            return self.store.get_all_stats()
