from datetime import datetime, timedelta, timezone

from app.services.price_stats import PriceObservation, compute_price_stats, format_amount, parse_timestamp

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def test_stats_for_three_reports():
    stats = compute_price_stats(
        [PriceObservation(price=p, observed_at=NOW - timedelta(days=1)) for p in (10, 20, 30)],
        now=NOW,
    )
    assert stats == {"min": "10.00", "max": "30.00", "avg": "20.00", "count": 3, "total": 3}


def test_count_only_includes_last_90_days():
    stats = compute_price_stats(
        [
            PriceObservation(price=12.5, observed_at=NOW - timedelta(days=10)),
            PriceObservation(price=15, observed_at=NOW - timedelta(days=89)),
            PriceObservation(price=40, observed_at=NOW - timedelta(days=91)),
            PriceObservation(price=41, observed_at=None),
        ],
        now=NOW,
    )
    assert stats["count"] == 2
    assert stats["total"] == 4
    assert stats["min"] == "12.50"
    assert stats["max"] == "41.00"


def test_no_observations_yields_none():
    assert compute_price_stats([], now=NOW) is None


def test_average_rounds_half_up():
    stats = compute_price_stats(
        [PriceObservation(price=0.01, observed_at=NOW), PriceObservation(price=0.02, observed_at=NOW)],
        now=NOW,
    )
    assert stats["avg"] == "0.02"


def test_format_amount():
    assert format_amount(49.99) == "49.99"
    assert format_amount("7") == "7.00"
    assert format_amount(2.675) == "2.68"


def test_parse_timestamp_accepts_z_suffix_and_naive_values():
    assert parse_timestamp("2026-10-01T00:00:00Z") == datetime(2026, 10, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2026-10-01 08:30:00").tzinfo == timezone.utc
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(None) is None
