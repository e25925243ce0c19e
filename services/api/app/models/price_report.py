"""Price report model.

A crowd-sourced observation: "I paid $X for medication M at source S".
Append-only; rows are never updated or deleted by the API.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.stores.postgres import Base


class PriceReport(Base):
    __tablename__ = "price_reports"
    __table_args__ = (
        Index("ix_price_reports_med_source_created", "medication_id", "source", "created_at"),
        CheckConstraint("price > 0 AND price <= 100000", name="ck_price_reports_price_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    medication_id: Mapped[str] = mapped_column(String(100))
    source: Mapped[str] = mapped_column(String(100))  # pharmacy or program the price was seen at

    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    location: Mapped[str | None] = mapped_column(String(200))
    report_date: Mapped[date | None] = mapped_column(Date)

    # Truncated hash of the submitter's forwarded address (stored only)
    ip_hash: Mapped[str | None] = mapped_column(String(64))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<PriceReport {self.medication_id}/{self.source} ${self.price}>"
