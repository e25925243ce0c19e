"""Savings option model.

One way to pay less for a medication: manufacturer copay card, patient
assistance program (PAP), copay foundation, discount card, etc.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class SavingsOption(Base):
    """Savings option attached to a medication strategy."""

    __tablename__ = "savings_options"

    id: Mapped[int] = mapped_column(primary_key=True)

    medication_id: Mapped[str] = mapped_column(
        ForeignKey("medication_strategies.medication_id"),
        index=True,
    )

    option_type: Mapped[str] = mapped_column(String(50))  # copay_card, pap, foundation, discount
    name: Mapped[str] = mapped_column(String(200))
    description: Mapped[str | None] = mapped_column(Text)

    # Cost to the patient (cents); 0 means free
    estimated_cost_cents: Mapped[int | None] = mapped_column(Integer)
    estimated_cost_note: Mapped[str | None] = mapped_column(Text)

    eligibility_criteria: Mapped[str | None] = mapped_column(Text)
    steps: Mapped[list[str] | None] = mapped_column(JSON)
    documents_needed: Mapped[list[str] | None] = mapped_column(JSON)

    # Contact
    url: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(String(50))

    # Empty list = no insurance restriction
    insurance_types: Mapped[list[str] | None] = mapped_column(JSON)

    # Higher priority is shown first
    priority: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

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
        return f"<SavingsOption {self.medication_id}:{self.option_type} p={self.priority}>"
