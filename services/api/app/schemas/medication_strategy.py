"""Schemas for the medication strategy endpoint (/medication-strategy)."""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field


def _none_to_list(v: object) -> object:
    return [] if v is None else v


# JSON list columns are nullable in the database
StrList = Annotated[list[str], BeforeValidator(_none_to_list)]


class SavingsOptionOut(BaseModel):
    """A single savings option, as stored."""

    id: int
    option_type: str
    name: str
    description: str | None = None
    estimated_cost_cents: int | None = None
    estimated_cost_note: str | None = None
    eligibility_criteria: str | None = None
    steps: StrList = Field(default_factory=list)
    documents_needed: StrList = Field(default_factory=list)
    url: str | None = None
    phone: str | None = None
    insurance_types: StrList = Field(default_factory=list)

    model_config = {"from_attributes": True}


class StrategySummary(BaseModel):
    """Summary row used for bulk loading."""

    medication_id: str
    generic_name: str
    brand_name: str
    category: str | None = None
    condition: str | None = None
    retail_price_low: int | None = None
    retail_price_high: int | None = None

    model_config = {"from_attributes": True}


class StrategyDetail(StrategySummary):
    """Full strategy with savings options (priority DESC)."""

    retail_price_note: str | None = None
    common_mistakes: StrList = Field(default_factory=list)
    savings_options: list[SavingsOptionOut] = Field(alias="savingsOptions", default_factory=list)

    model_config = {"from_attributes": True, "populate_by_name": True}


class PharmacyInfo(BaseModel):
    """Availability of a medication at one pharmacy."""

    available: bool
    price_cents: int | None = Field(alias="priceCents", default=None)
    price_note: str | None = Field(alias="priceNote", default=None)
    url: str | None = None

    model_config = {"populate_by_name": True}


class StrategyResponse(BaseModel):
    """Response payload for GET /medication-strategy?medicationId=...

    `strategy` is null when the identifier matches no active medication.
    """

    strategy: StrategyDetail | None = None
    pharmacies: dict[str, PharmacyInfo] = Field(default_factory=dict)


class StrategyListResponse(BaseModel):
    """Response payload for GET /medication-strategy (no identifier)."""

    strategies: list[StrategySummary] = Field(default_factory=list)
    pharmacy_availability: dict[str, dict[str, bool]] = Field(
        alias="pharmacyAvailability",
        default_factory=dict,
    )

    model_config = {"populate_by_name": True}
