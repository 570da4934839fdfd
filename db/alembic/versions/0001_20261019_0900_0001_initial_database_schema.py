"""Initial database schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade database schema."""
    # Master data
    op.create_table('tour_packages',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('capacity_default', sa.Integer(), nullable=False),
        sa.Column('price_default', sa.Integer(), nullable=False),
        sa.Column('remaining_seats', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('capacity_default >= 0', name='ck_tour_package_capacity_non_negative'),
        sa.CheckConstraint('price_default >= 0', name='ck_tour_package_price_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tour_packages_title'), 'tour_packages', ['title'], unique=False)

    op.create_table('transports',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('base_rate', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('capacity >= 0', name='ck_transport_capacity_non_negative'),
        sa.CheckConstraint('base_rate >= 0', name='ck_transport_base_rate_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_transports_type'), 'transports', ['type'], unique=False)

    # Bookings
    op.create_table('bookings',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('package_id', sa.String(length=64), nullable=True),
        sa.Column('date', sa.String(length=32), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('guests', sa.String(length=255), nullable=True),
        sa.Column('customer', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('amount >= 0', name='ck_booking_amount_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bookings_date'), 'bookings', ['date'], unique=False)
    op.create_index(op.f('ix_bookings_package_id'), 'bookings', ['package_id'], unique=False)
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)
    op.create_index(op.f('ix_bookings_type'), 'bookings', ['type'], unique=False)

    # Tour manual overrides, one row per calendar date
    op.create_table('daily_inventory',
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('is_blocked', sa.Boolean(), nullable=False),
        sa.Column('booked', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('capacity >= 0', name='ck_daily_inventory_capacity_non_negative'),
        sa.CheckConstraint('price >= 0', name='ck_daily_inventory_price_non_negative'),
        sa.CheckConstraint('booked >= 0', name='ck_daily_inventory_booked_non_negative'),
        sa.PrimaryKeyConstraint('date')
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('daily_inventory')
    op.drop_table('bookings')
    op.drop_table('transports')
    op.drop_table('tour_packages')
