"""create_mednav_tables

Revision ID: 3e8d2b7c5a01
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3e8d2b7c5a01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "medication_strategies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("medication_id", sa.String(length=100), nullable=False),
        sa.Column("generic_name", sa.String(length=200), nullable=False),
        sa.Column("brand_name", sa.String(length=200), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("condition", sa.String(length=200), nullable=True),
        sa.Column("retail_price_low", sa.Integer(), nullable=True),
        sa.Column("retail_price_high", sa.Integer(), nullable=True),
        sa.Column("retail_price_note", sa.Text(), nullable=True),
        sa.Column("common_mistakes", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_medication_strategies_medication_id"), "medication_strategies", ["medication_id"], unique=True
    )
    op.create_index(op.f("ix_medication_strategies_generic_name"), "medication_strategies", ["generic_name"])
    op.create_index(op.f("ix_medication_strategies_brand_name"), "medication_strategies", ["brand_name"])
    op.create_index(op.f("ix_medication_strategies_is_active"), "medication_strategies", ["is_active"])
    # Case-insensitive identifier resolution
    op.create_index(
        "ix_medication_strategies_lower_generic_name",
        "medication_strategies",
        [sa.text("lower(generic_name)")],
    )
    op.create_index(
        "ix_medication_strategies_lower_brand_name",
        "medication_strategies",
        [sa.text("lower(brand_name)")],
    )

    op.create_table(
        "savings_options",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("medication_id", sa.String(length=100), nullable=False),
        sa.Column("option_type", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("estimated_cost_cents", sa.Integer(), nullable=True),
        sa.Column("estimated_cost_note", sa.Text(), nullable=True),
        sa.Column("eligibility_criteria", sa.Text(), nullable=True),
        sa.Column("steps", sa.JSON(), nullable=True),
        sa.Column("documents_needed", sa.JSON(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("insurance_types", sa.JSON(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["medication_id"], ["medication_strategies.medication_id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_savings_options_medication_id"), "savings_options", ["medication_id"])
    op.create_index(op.f("ix_savings_options_is_active"), "savings_options", ["is_active"])

    op.create_table(
        "pharmacy_availability",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("medication_id", sa.String(length=100), nullable=False),
        sa.Column("pharmacy", sa.String(length=100), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("price_cents", sa.Integer(), nullable=True),
        sa.Column("price_note", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["medication_id"], ["medication_strategies.medication_id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("medication_id", "pharmacy", name="uq_pharmacy_availability_med_pharmacy"),
    )
    op.create_index(op.f("ix_pharmacy_availability_medication_id"), "pharmacy_availability", ["medication_id"])

    op.create_table(
        "price_reports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("medication_id", sa.String(length=100), nullable=False),
        sa.Column("source", sa.String(length=100), nullable=False),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("report_date", sa.Date(), nullable=True),
        sa.Column("ip_hash", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("price > 0 AND price <= 100000", name="ck_price_reports_price_range"),
    )
    op.create_index(
        "ix_price_reports_med_source_created",
        "price_reports",
        ["medication_id", "source", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_price_reports_med_source_created", table_name="price_reports")
    op.drop_table("price_reports")
    op.drop_index(op.f("ix_pharmacy_availability_medication_id"), table_name="pharmacy_availability")
    op.drop_table("pharmacy_availability")
    op.drop_index(op.f("ix_savings_options_is_active"), table_name="savings_options")
    op.drop_index(op.f("ix_savings_options_medication_id"), table_name="savings_options")
    op.drop_table("savings_options")
    op.drop_index("ix_medication_strategies_lower_brand_name", table_name="medication_strategies")
    op.drop_index("ix_medication_strategies_lower_generic_name", table_name="medication_strategies")
    op.drop_index(op.f("ix_medication_strategies_is_active"), table_name="medication_strategies")
    op.drop_index(op.f("ix_medication_strategies_brand_name"), table_name="medication_strategies")
    op.drop_index(op.f("ix_medication_strategies_generic_name"), table_name="medication_strategies")
    op.drop_index(op.f("ix_medication_strategies_medication_id"), table_name="medication_strategies")
    op.drop_table("medication_strategies")
