"""Tests for medication strategy lookups against an in-memory database."""

from types import SimpleNamespace

import pytest

from app.models import MedicationStrategy, PharmacyAvailability, SavingsOption
from app.services.medication_strategy import (
    build_pharmacy_map,
    get_strategy,
    group_pharmacy_availability,
    list_strategies,
    normalize_identifier,
    resolve_medication_id,
)


@pytest.fixture
async def seeded(sqlite_db):
    async with sqlite_db() as session:
        session.add_all(
            [
                MedicationStrategy(
                    medication_id="ozempic",
                    generic_name="semaglutide",
                    brand_name="Ozempic",
                    category="GLP-1",
                    retail_price_low=93500,
                    retail_price_high=100000,
                    common_mistakes=["Using a copay card with Medicare"],
                    is_active=True,
                ),
                MedicationStrategy(
                    medication_id="apixaban-5mg",
                    generic_name="apixaban",
                    brand_name="Eliquis",
                    is_active=True,
                ),
                MedicationStrategy(
                    medication_id="retired",
                    generic_name="oldcillin",
                    brand_name="Oldbrand",
                    is_active=False,
                ),
            ]
        )
        await session.flush()
        session.add_all(
            [
                SavingsOption(medication_id="ozempic", option_type="discount", name="Low", priority=10, is_active=True),
                SavingsOption(medication_id="ozempic", option_type="pap", name="High", priority=90, is_active=True),
                SavingsOption(medication_id="ozempic", option_type="foundation", name="Mid", priority=50, is_active=True),
                SavingsOption(medication_id="ozempic", option_type="copay_card", name="Hidden", priority=99, is_active=False),
                PharmacyAvailability(medication_id="ozempic", pharmacy="costco", is_available=True, price_cents=93600),
                PharmacyAvailability(medication_id="ozempic", pharmacy="costplus", is_available=False),
                PharmacyAvailability(medication_id="apixaban-5mg", pharmacy="costco", is_available=True),
            ]
        )
        await session.commit()
    return sqlite_db


def test_normalize_identifier():
    assert normalize_identifier("  OzEmPiC ") == "ozempic"
    assert normalize_identifier("") is None
    assert normalize_identifier("   ") is None
    assert normalize_identifier(None) is None


def test_build_pharmacy_map_has_one_entry_per_pharmacy():
    rows = [
        SimpleNamespace(pharmacy="costco", is_available=False, price_cents=None, price_note=None, url=None),
        SimpleNamespace(pharmacy="costplus", is_available=True, price_cents=360, price_note="30 tabs", url=None),
        SimpleNamespace(pharmacy="costco", is_available=True, price_cents=400, price_note=None, url="https://x"),
    ]
    pharmacies = build_pharmacy_map(rows)

    assert set(pharmacies) == {"costco", "costplus"}
    assert pharmacies["costco"].available is True
    assert pharmacies["costco"].price_cents == 400


def test_group_pharmacy_availability():
    rows = [
        SimpleNamespace(medication_id="a", pharmacy="costco", is_available=True),
        SimpleNamespace(medication_id="a", pharmacy="costplus", is_available=False),
        SimpleNamespace(medication_id="b", pharmacy="costco", is_available=False),
    ]
    assert group_pharmacy_availability(rows) == {
        "a": {"costco": True, "costplus": False},
        "b": {"costco": False},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("identifier", ["ozempic", "OZEMPIC", "semaglutide", "SemaGlutide", " Ozempic "])
async def test_resolve_by_id_generic_or_brand(seeded, identifier: str):
    async with seeded() as session:
        assert await resolve_medication_id(session, identifier) == "ozempic"


@pytest.mark.asyncio
async def test_resolve_ignores_inactive_and_unknown(seeded):
    async with seeded() as session:
        assert await resolve_medication_id(session, "retired") is None
        assert await resolve_medication_id(session, "Oldbrand") is None
        assert await resolve_medication_id(session, "unknown") is None
        assert await resolve_medication_id(session, "") is None


@pytest.mark.asyncio
async def test_lookups_return_same_record(seeded):
    by_id = await get_strategy("apixaban-5mg")
    by_generic = await get_strategy("APIXABAN")
    by_brand = await get_strategy("eliquis")

    assert by_id.strategy is not None
    assert by_id.strategy.medication_id == "apixaban-5mg"
    assert by_id.pharmacies["costco"].available is True
    assert by_id == by_generic == by_brand


@pytest.mark.asyncio
async def test_savings_options_are_active_and_sorted_by_priority(seeded):
    response = await get_strategy("Ozempic")
    names = [o.name for o in response.strategy.savings_options]

    assert names == ["High", "Mid", "Low"]
    assert "Hidden" not in names


@pytest.mark.asyncio
async def test_pharmacies_keyed_by_name(seeded):
    response = await get_strategy("ozempic")
    assert set(response.pharmacies) == {"costco", "costplus"}
    assert response.pharmacies["costco"].price_cents == 93600
    assert response.pharmacies["costplus"].available is False


@pytest.mark.asyncio
async def test_unknown_identifier_returns_empty_shape(seeded):
    response = await get_strategy("retired")
    assert response.strategy is None
    assert response.pharmacies == {}


@pytest.mark.asyncio
async def test_list_strategies_only_active_sorted_by_brand(seeded):
    response = await list_strategies()

    assert [s.brand_name for s in response.strategies] == ["Eliquis", "Ozempic"]
    assert response.pharmacy_availability == {
        "ozempic": {"costco": True, "costplus": False},
        "apixaban-5mg": {"costco": True},
    }
