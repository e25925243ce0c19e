"""Medication strategy model.

A medication strategy is the curated savings playbook for one medication:
display names, retail price range and the mistakes patients commonly make.

Example medication_id: "ozempic"
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class MedicationStrategy(Base):
    """Savings strategy for a single medication."""

    __tablename__ = "medication_strategies"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Canonical identifier (e.g., "ozempic"); also resolvable by name
    medication_id: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    # Display names
    generic_name: Mapped[str] = mapped_column(String(200), index=True)  # "semaglutide"
    brand_name: Mapped[str] = mapped_column(String(200), index=True)  # "Ozempic"
    category: Mapped[str | None] = mapped_column(String(100))  # "GLP-1"
    condition: Mapped[str | None] = mapped_column(String(200))  # "Type 2 diabetes"

    # Retail price range in cents
    retail_price_low: Mapped[int | None] = mapped_column(Integer)
    retail_price_high: Mapped[int | None] = mapped_column(Integer)
    retail_price_note: Mapped[str | None] = mapped_column(Text)

    # JSON array of strings
    common_mistakes: Mapped[list[str] | None] = mapped_column(JSON)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<MedicationStrategy {self.medication_id}>"
