"""Tests for MedicationStrategyClient and its formatting helpers."""

import httpx
import pytest

from app.clients import (
    MedicationStrategyClient,
    TTLCache,
    filter_savings_options_by_insurance,
    format_price,
    format_price_range,
)

STRATEGY_PAYLOAD = {
    "strategy": {"medication_id": "ozempic", "savingsOptions": []},
    "pharmacies": {"costco": {"available": True, "priceCents": 93600, "priceNote": None, "url": None}},
}


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _client(handler, clock: FakeClock | None = None) -> MedicationStrategyClient:
    cache = TTLCache(300, clock=clock or FakeClock())
    return MedicationStrategyClient(
        "http://api.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        cache=cache,
    )


@pytest.mark.asyncio
async def test_fetch_is_cached_for_five_minutes():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=STRATEGY_PAYLOAD)

    clock = FakeClock()
    client = _client(handler, clock)

    assert await client.fetch_medication_strategy("ozempic") == STRATEGY_PAYLOAD
    assert await client.fetch_medication_strategy("ozempic") == STRATEGY_PAYLOAD
    assert len(calls) == 1
    assert calls[0].url.path == "/medication-strategy"
    assert calls[0].url.params["medicationId"] == "ozempic"

    clock.now += 300
    await client.fetch_medication_strategy("ozempic")
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_clear_cache_forces_refetch():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=STRATEGY_PAYLOAD)

    client = _client(handler)
    await client.fetch_medication_strategy("ozempic")
    client.clear_cache()
    await client.fetch_medication_strategy("ozempic")
    assert calls == 2


@pytest.mark.asyncio
async def test_server_error_returns_empty_shape_and_is_not_cached(reporter):
    responses = [httpx.Response(500, json={"error": {"code": "INTERNAL_ERROR"}}), httpx.Response(200, json=STRATEGY_PAYLOAD)]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    client = _client(handler)

    assert await client.fetch_medication_strategy("ozempic") == {"strategy": None, "pharmacies": {}}
    assert reporter.messages and reporter.messages[0][1] == "warning"
    assert await client.fetch_medication_strategy("ozempic") == STRATEGY_PAYLOAD


@pytest.mark.asyncio
async def test_network_failure_returns_empty_shapes():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    assert await client.fetch_medication_strategy("ozempic") == {"strategy": None, "pharmacies": {}}
    assert await client.fetch_all_medication_strategies() == {"strategies": [], "pharmacyAvailability": {}}
    assert await client.check_pharmacy_availability("ozempic", "costco") is None


@pytest.mark.asyncio
async def test_check_pharmacy_availability():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=STRATEGY_PAYLOAD)

    client = _client(handler)

    assert (await client.check_pharmacy_availability("ozempic", "costco"))["priceCents"] == 93600
    assert await client.check_pharmacy_availability("ozempic", "walmart") is None


@pytest.mark.asyncio
async def test_fetch_all_is_not_cached():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        assert "medicationId" not in request.url.params
        return httpx.Response(200, json={"strategies": [], "pharmacyAvailability": {"a": {"costco": True}}})

    client = _client(handler)
    await client.fetch_all_medication_strategies()
    data = await client.fetch_all_medication_strategies()
    assert calls == 2
    assert data["pharmacyAvailability"] == {"a": {"costco": True}}


def test_filter_savings_options_by_insurance():
    options = [
        {"name": "open", "insurance_types": []},
        {"name": "unset"},
        {"name": "medicare", "insurance_types": ["medicare", "medicaid"]},
        {"name": "commercial", "insurance_types": ["commercial"]},
    ]

    filtered = filter_savings_options_by_insurance(options, "medicare")
    assert [o["name"] for o in filtered] == ["open", "unset", "medicare"]
    assert filter_savings_options_by_insurance(options, None) is options
    assert filter_savings_options_by_insurance(options, "") is options
    assert filter_savings_options_by_insurance(None, "medicare") is None


def test_format_price():
    assert format_price(None) is None
    assert format_price(0) == "FREE"
    assert format_price(2500) == "$25"
    assert format_price(93550) == "$936"
    assert format_price(250) == "$3"


def test_format_price_range():
    assert format_price_range(None, None) is None
    assert format_price_range(0, 0) is None
    assert format_price_range(2500, 2500) == "$25"
    assert format_price_range(2500, 10000) == "$25-$100"
    assert format_price_range(0, 2500) == "FREE-$25"
    assert format_price_range(None, 2500) == "$25"
    assert format_price_range(2500, None) == "$25"
