"""Create rooms and bookings

Revision ID: 20260601_0001
Revises: 
Create Date: 2026-06-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '20260601_0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def _has_table(bind, name: str) -> bool:
    return inspect(bind).has_table(name)

def upgrade() -> None:
    bind = op.get_bind()
    booking_status_enum = sa.Enum('confirmed', 'canceled', 'completed', name='booking_status')

    if not _has_table(bind, 'rooms'):
        op.create_table('rooms',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('type', sa.String(length=100), nullable=False),
            sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('amenities', sa.JSON(), nullable=False),
            sa.Column('capacity', sa.Integer(), nullable=False),
            sa.Column('image_url', sa.String(length=500), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
            sa.PrimaryKeyConstraint('id')
        )

    if not _has_table(bind, 'bookings'):
        op.create_table('bookings',
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('room_id', sa.String(length=36), nullable=False),
            sa.Column('guest_name', sa.String(length=200), nullable=False),
            sa.Column('guest_email', sa.String(length=320), nullable=False),
            sa.Column('guest_phone', sa.String(length=50), nullable=False),
            sa.Column('check_in_date', sa.Date(), nullable=False),
            sa.Column('check_out_date', sa.Date(), nullable=False),
            sa.Column('number_of_guests', sa.Integer(), nullable=False),
            sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column('status', booking_status_enum, server_default='confirmed', nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
            sa.ForeignKeyConstraint(['room_id'], ['rooms.id']),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_bookings_room_id'), 'bookings', ['room_id'], unique=False)
        op.create_index(op.f('ix_bookings_check_in_date'), 'bookings', ['check_in_date'], unique=False)
        op.create_index(op.f('ix_bookings_check_out_date'), 'bookings', ['check_out_date'], unique=False)
        op.create_index('ix_bookings_guest_email', 'bookings', ['guest_email'], unique=False)
        # composite index helps overlap searches
        op.create_index('ix_bookings_room_dates', 'bookings', ['room_id', 'check_in_date', 'check_out_date'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_bookings_room_dates', table_name='bookings')
    op.drop_index('ix_bookings_guest_email', table_name='bookings')
    op.drop_index(op.f('ix_bookings_check_out_date'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_check_in_date'), table_name='bookings')
    op.drop_index(op.f('ix_bookings_room_id'), table_name='bookings')
    op.drop_table('bookings')
    op.drop_table('rooms')
    sa.Enum(name='booking_status').drop(op.get_bind(), checkfirst=True)
