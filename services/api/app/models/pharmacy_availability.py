"""Pharmacy availability model.

Whether a named pharmacy (Costco, Mark Cuban Cost Plus, ...) carries a
medication, and at what price.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class PharmacyAvailability(Base):
    __tablename__ = "pharmacy_availability"
    __table_args__ = (
        UniqueConstraint("medication_id", "pharmacy", name="uq_pharmacy_availability_med_pharmacy"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    medication_id: Mapped[str] = mapped_column(
        ForeignKey("medication_strategies.medication_id"),
        index=True,
    )
    pharmacy: Mapped[str] = mapped_column(String(100))  # e.g. "costco", "costplus"

    is_available: Mapped[bool] = mapped_column(Boolean, default=False)
    price_cents: Mapped[int | None] = mapped_column(Integer)
    price_note: Mapped[str | None] = mapped_column(Text)
    url: Mapped[str | None] = mapped_column(Text)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<PharmacyAvailability {self.medication_id}@{self.pharmacy}>"
