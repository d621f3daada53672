"""init_booking_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Schema:
- booking: Booking records, PNR unique, looked up by owner email
- passenger: Travellers of a booking, removed only with their booking
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create booking and passenger tables."""

    op.create_table(
        'booking',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('pnr', sa.String(length=16), nullable=False),
        sa.Column('flight_id', sa.Integer(), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('num_seats', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('pnr', name='uq_booking_pnr'),
    )
    op.create_index(op.f('ix_booking_flight_id'), 'booking', ['flight_id'], unique=False)
    op.create_index(op.f('ix_booking_user_email'), 'booking', ['user_email'], unique=False)

    op.create_table(
        'passenger',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('seat_number', sa.String(length=10), nullable=True),
        sa.Column('meal_preference', sa.String(length=50), nullable=True),
        sa.ForeignKeyConstraint(['booking_id'], ['booking.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_passenger_booking_id'), 'passenger', ['booking_id'], unique=False)


def downgrade() -> None:
    """Drop booking schema."""

    op.drop_index(op.f('ix_passenger_booking_id'), table_name='passenger')
    op.drop_table('passenger')
    op.drop_index(op.f('ix_booking_user_email'), table_name='booking')
    op.drop_index(op.f('ix_booking_flight_id'), table_name='booking')
    op.drop_table('booking')
