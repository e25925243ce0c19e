"""Price statistics shared by the API and the offline client fallback.

Both sides must produce the same shape:
    {"min": "10.00", "max": "30.00", "avg": "20.00", "count": 3, "total": 3}

- min/max/avg: strings rounded half-up to two decimals
- count: observations newer than RECENT_WINDOW
- total: all observations considered

Prices are validated the same way on both sides: rounded half-up to cents,
then accepted only if 0 < price <= MAX_PRICE.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Sequence
import math

RECENT_WINDOW = timedelta(days=90)
MAX_REPORTS_PER_PAIR = 50
MAX_PRICE = 100_000

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class PriceObservation:
    price: float | Decimal
    observed_at: datetime | str | None = None


def format_amount(value: Any) -> str:
    """Format a numeric amount with two decimals, rounding half-up."""
    return str(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def parse_price(value: Any) -> float | None:
    """Parse a submitted price into a float; None if it is not a finite number."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            price = float(value)
        elif isinstance(value, str):
            price = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(price):
        return None
    return price


def to_valid_price(value: Any) -> Decimal | None:
    """Parse a price and round it to cents (half-up).

    Returns None unless the rounded amount is in (0, MAX_PRICE].
    """
    price = parse_price(value)
    if price is None or price <= 0 or price > MAX_PRICE:
        return None
    amount = Decimal(str(price)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    if amount <= 0 or amount > MAX_PRICE:
        return None
    return amount


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are treated as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def compute_price_stats(
    observations: Sequence[PriceObservation],
    *,
    now: datetime | None = None,
) -> dict[str, Any] | None:
    """Compute min/max/avg/count/total over observations.

    Returns None when there are no observations.
    """
    if not observations:
        return None

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - RECENT_WINDOW

    prices = [Decimal(str(o.price)) for o in observations]
    observed = (parse_timestamp(o.observed_at) for o in observations)
    recent_count = sum(1 for ts in observed if ts is not None and ts > cutoff)

    return {
        "min": format_amount(min(prices)),
        "max": format_amount(max(prices)),
        "avg": format_amount(sum(prices) / len(prices)),
        "count": recent_count,
        "total": len(prices),
    }
