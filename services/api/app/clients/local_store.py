"""Local persisted store for price reports.

Used by PriceReportsClient when the API is unreachable. A single JSON file
holds a mapping of "{medicationId}_{source}" to a list of entries:

    {"ozempic_costco": [{"price": 49.99, "location": "Austin, TX",
                         "date": "2026-10-01", "timestamp": "2026-10-01T12:00:00+00:00"}]}

Each list keeps only the last MAX_REPORTS_PER_PAIR entries (oldest evicted).
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timezone
import json
from pathlib import Path
from typing import Any

from app.error_logger import log_error, log_warning
from app.services.price_stats import (
    MAX_REPORTS_PER_PAIR,
    PriceObservation,
    compute_price_stats,
    to_valid_price,
)

COMPONENT = "LocalPriceReportStore"
INVALID_PRICE_MESSAGE = "Invalid price value"


def report_key(medication_id: str, source: str) -> str:
    return f"{medication_id}_{source}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalPriceReportStore:
    """JSON-file backed price report history."""

    def __init__(self, path: str | Path, *, clock: Callable[[], datetime] = _utcnow):
        self.path = Path(path)
        self._clock = clock

    def load(self) -> dict[str, list[dict[str, Any]]]:
        """Read the whole mapping; missing or unreadable files yield {}."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            log_error(e, component=COMPONENT, extra={"path": str(self.path)})
            return {}

        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            log_error(e, component=COMPONENT, extra={"path": str(self.path)})
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, list)}

    def add_report(
        self,
        medication_id: str,
        source: str,
        price: Any,
        location: str | None = None,
        report_date: date | str | None = None,
    ) -> dict[str, Any]:
        """Append a report, trimming the pair's history to the cap.

        Returns:
            {"success": True} or {"success": False, "error": str}.
        """
        amount = to_valid_price(price)
        if amount is None:
            log_warning(f"Rejected local price report: {price!r}", component=COMPONENT)
            return {"success": False, "error": INVALID_PRICE_MESSAGE}

        try:
            reports = self.load()
            key = report_key(medication_id, source)
            entries = reports.setdefault(key, [])
            entries.append(
                {
                    "price": float(amount),
                    "location": location,
                    "date": report_date.isoformat() if isinstance(report_date, date) else report_date,
                    "timestamp": self._clock().isoformat(),
                }
            )
            if len(entries) > MAX_REPORTS_PER_PAIR:
                reports[key] = entries[-MAX_REPORTS_PER_PAIR:]

            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(reports), encoding="utf-8")
            return {"success": True}
        except (OSError, TypeError, ValueError) as e:
            log_error(e, component=COMPONENT, extra={"medication_id": medication_id, "source": source})
            return {"success": False, "error": str(e)}

    def get_reports(self, medication_id: str, source: str) -> list[dict[str, Any]]:
        return self.load().get(report_key(medication_id, source), [])

    def get_stats(self, medication_id: str, source: str) -> dict[str, Any] | None:
        """Stats for one pair, same shape as the API's; None if nothing stored."""
        return self._stats_for(self.get_reports(medication_id, source))

    def get_all_stats(self) -> dict[str, dict[str, Any]]:
        """Stats for every stored pair, keyed like the store."""
        stats: dict[str, dict[str, Any]] = {}
        for key, entries in self.load().items():
            pair_stats = self._stats_for(entries)
            if pair_stats is not None:
                stats[key] = pair_stats
        return stats

    def _stats_for(self, entries: list[dict[str, Any]]) -> dict[str, Any] | None:
        # Only prices in (0, MAX_PRICE] count
        observations = []
        for entry in entries[-MAX_REPORTS_PER_PAIR:]:
            if not isinstance(entry, dict) or isinstance(entry.get("price"), str):
                continue
            amount = to_valid_price(entry.get("price"))
            if amount is not None:
                observations.append(PriceObservation(price=amount, observed_at=entry.get("timestamp")))
        return compute_price_stats(observations, now=self._clock())
