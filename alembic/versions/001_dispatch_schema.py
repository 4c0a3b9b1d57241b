"""Dispatch schema - drivers, orders, assignments, scores, pricing

Revision ID: 001_dispatch_schema
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_dispatch_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create enum types
    op.execute("CREATE TYPE driverstatus AS ENUM ('PENDING', 'APPROVED', 'SUSPENDED', 'REJECTED')")
    op.execute("CREATE TYPE vehicletype AS ENUM ('MOTORCYCLE', 'BICYCLE', 'CAR')")
    op.execute("CREATE TYPE orderstatus AS ENUM ('CREATED', 'ASSIGNED', 'PICKED_UP', 'DELIVERED', 'CANCELLED')")

    op.create_table(
        'cities',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('avatar_url', sa.String(500), nullable=True),
    )

    op.create_table(
        'delivery_riders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('city_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('cities.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('status', postgresql.ENUM('PENDING', 'APPROVED', 'SUSPENDED', 'REJECTED', name='driverstatus', create_type=False), nullable=False, server_default='PENDING', index=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('current_latitude', sa.Float(), nullable=True),
        sa.Column('current_longitude', sa.Float(), nullable=True),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('total_deliveries', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('vehicle_type', postgresql.ENUM('MOTORCYCLE', 'BICYCLE', 'CAR', name='vehicletype', create_type=False), nullable=False, server_default='MOTORCYCLE'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'food_vendors',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('city_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('cities.id', ondelete='SET NULL'), nullable=True, index=True),
    )

    op.create_table(
        'food_orders',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_number', sa.String(50), nullable=False, index=True),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('food_vendors.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('status', postgresql.ENUM('CREATED', 'ASSIGNED', 'PICKED_UP', 'DELIVERED', 'CANCELLED', name='orderstatus', create_type=False), nullable=False, server_default='CREATED', index=True),
        sa.Column('rider_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('delivery_riders.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('customer_name', sa.String(255), nullable=True),
        sa.Column('customer_phone', sa.String(20), nullable=True),
        sa.Column('delivery_address', sa.Text(), nullable=True),
        sa.Column('delivery_latitude', sa.Float(), nullable=True),
        sa.Column('delivery_longitude', sa.Float(), nullable=True),
        sa.Column('estimated_time_minutes', sa.Integer(), nullable=True),
        sa.Column('distance_km', sa.Float(), nullable=True),
        sa.Column('delivery_fee', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'delivery_assignments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('food_orders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('rider_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('delivery_riders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('food_vendors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(30), nullable=False, server_default='assigned'),
        sa.Column('pickup_latitude', sa.Float(), nullable=False),
        sa.Column('pickup_longitude', sa.Float(), nullable=False),
        sa.Column('customer_latitude', sa.Float(), nullable=True),
        sa.Column('customer_longitude', sa.Float(), nullable=True),
        sa.Column('customer_address', sa.Text(), nullable=True),
        sa.Column('customer_name', sa.String(255), nullable=True),
        sa.Column('customer_phone', sa.String(20), nullable=True),
        sa.Column('estimated_time_minutes', sa.Integer(), nullable=False),
        sa.Column('distance_km', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'notifications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'driver_dispatch_scores',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('driver_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('delivery_riders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('food_orders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('distance_score', sa.Float(), nullable=False),
        sa.Column('idle_score', sa.Float(), nullable=False),
        sa.Column('rating_score', sa.Float(), nullable=False),
        sa.Column('acceptance_score', sa.Float(), nullable=False),
        sa.Column('total_score', sa.Float(), nullable=False, index=True),
        sa.Column('was_assigned', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'delivery_pricing',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('city_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('cities.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('base_fee', sa.Float(), nullable=True),
        sa.Column('per_km_fee', sa.Float(), nullable=True),
        sa.Column('min_fee', sa.Float(), nullable=True),
        sa.Column('max_fee', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true', index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'surge_rules',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('city_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('cities.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('trigger_type', sa.String(30), nullable=False, server_default='time_window'),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('multiplier', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true', index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table('surge_rules')
    op.drop_table('delivery_pricing')
    op.drop_table('driver_dispatch_scores')
    op.drop_table('notifications')
    op.drop_table('delivery_assignments')
    op.drop_table('food_orders')
    op.drop_table('food_vendors')
    op.drop_table('delivery_riders')
    op.drop_table('profiles')
    op.drop_table('cities')

    op.execute("DROP TYPE IF EXISTS orderstatus")
    op.execute("DROP TYPE IF EXISTS vehicletype")
    op.execute("DROP TYPE IF EXISTS driverstatus")
