"""Initial schema: seats, bookings, cancellation log.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "seats",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("label", sa.String(255), nullable=False),
        sa.Column("x", sa.Float(), nullable=False),
        sa.Column("y", sa.Float(), nullable=False),
        sa.Column("zone", sa.String(255), nullable=True),
        sa.Column("notes", sa.String(1000), nullable=True),
        # Booking revision: bumped by every booking write on this seat
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("x >= 0 AND x <= 100", name="check_seat_x_range"),
        sa.CheckConstraint("y >= 0 AND y <= 100", name="check_seat_y_range"),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("seat_id", sa.String(64), sa.ForeignKey("seats.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("series_id", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        # One booking per seat per day. The seat revision check prevents most
        # races; this constraint catches anything that slips through.
        sa.UniqueConstraint("seat_id", "date", name="uq_seat_date_booking"),
    )
    op.create_index("ix_bookings_seat_id", "bookings", ["seat_id"])
    # Day views and analytics ranges filter on the reserved date
    op.create_index("ix_bookings_date", "bookings", ["date"])
    # Series cancellation looks occurrences up by series id
    op.create_index("ix_bookings_series_id", "bookings", ["series_id"])

    op.create_table(
        "cancellations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.String(36), nullable=False),
        sa.Column("seat_id", sa.String(64), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("user_name", sa.String(255), nullable=False),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("source IN ('single', 'series')", name="check_cancellation_source"),
    )
    op.create_index("ix_cancellations_cancelled_at", "cancellations", ["cancelled_at"])


def downgrade() -> None:
    op.drop_table("cancellations")
    op.drop_table("bookings")
    op.drop_table("seats")
