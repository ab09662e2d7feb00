"""Create storefront, subscription and analytics tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    """Create FarmX tables"""

    # 1. Users (embedded cart, owned products, fulfilled orders)
    op.create_table('users',
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('cart_items', sa.JSON(), nullable=False),
        sa.Column('owned_products', sa.JSON(), nullable=False),
        sa.Column('fulfilled_orders', sa.JSON(), nullable=False),
        sa.Column('subscription_id', sa.String(36), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),

        sa.PrimaryKeyConstraint('user_id', name='pk_users'),
        sa.CheckConstraint("role IN ('user', 'admin', 'expert')", name='ck_users_role'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 2. Products
    op.create_table('products',
        sa.Column('product_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('sku', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('in_stock', sa.Boolean(), nullable=True),
        *_timestamps(),

        sa.PrimaryKeyConstraint('product_id', name='pk_products'),
        sa.UniqueConstraint('sku', name='uq_products_sku'),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )
    op.create_index('ix_products_is_active', 'products', ['is_active'])

    # 3. Orders and their frozen line items
    op.create_table('orders',
        sa.Column('order_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('total', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('checkout_key', sa.String(80), nullable=True),
        sa.Column('ownership_transferred', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),

        sa.PrimaryKeyConstraint('order_id', name='pk_orders'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], name='fk_orders_user_id_users', ondelete='CASCADE'),
        sa.UniqueConstraint('checkout_key', name='uq_orders_checkout_key'),
        sa.CheckConstraint("status IN ('pending', 'completed', 'cancelled')", name='ck_orders_status'),
        sa.CheckConstraint('total >= 0', name='ck_orders_total_non_negative'),
    )
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])

    op.create_table('order_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.String(36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('product_id', sa.String(36), nullable=False),
        sa.Column('qty', sa.Integer(), nullable=False),
        sa.Column('price_at_purchase', sa.Numeric(12, 2), nullable=False),

        sa.PrimaryKeyConstraint('id', name='pk_order_items'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.order_id'], name='fk_order_items_order_id_orders', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.product_id'], name='fk_order_items_product_id_products'),
        sa.CheckConstraint('qty >= 1', name='ck_order_items_qty_positive'),
        sa.CheckConstraint('price_at_purchase >= 0', name='ck_order_items_price_non_negative'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    # 4. Subscriptions and the append-only payment ledger
    op.create_table('subscriptions',
        sa.Column('subscription_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('plan', sa.String(20), nullable=False, server_default='free'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('auto_renew', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('price', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='USD'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),

        sa.PrimaryKeyConstraint('subscription_id', name='pk_subscriptions'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], name='fk_subscriptions_user_id_users', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', name='uq_subscriptions_user_id'),
        sa.CheckConstraint("plan IN ('free', 'premium', 'enterprise')", name='ck_subscriptions_plan'),
        sa.CheckConstraint("status IN ('active', 'cancelled', 'expired', 'pending')", name='ck_subscriptions_status'),
    )

    op.create_table('subscription_payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('subscription_id', sa.String(36), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('transaction_id', sa.String(64), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='success'),

        sa.PrimaryKeyConstraint('id', name='pk_subscription_payments'),
        sa.ForeignKeyConstraint(
            ['subscription_id'], ['subscriptions.subscription_id'],
            name='fk_subscription_payments_subscription_id_subscriptions', ondelete='CASCADE'
        ),
        sa.UniqueConstraint('transaction_id', name='uq_subscription_payments_transaction_id'),
    )
    op.create_index('ix_subscription_payments_subscription_id', 'subscription_payments', ['subscription_id'])

    # 5. Farms, ponds and scan results
    op.create_table('farms',
        sa.Column('farm_id', sa.String(36), nullable=False),
        sa.Column('owner_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),

        sa.PrimaryKeyConstraint('farm_id', name='pk_farms'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.user_id'], name='fk_farms_owner_id_users', ondelete='CASCADE'),
    )
    op.create_index('ix_farms_owner_id', 'farms', ['owner_id'])

    op.create_table('ponds',
        sa.Column('pond_id', sa.String(36), nullable=False),
        sa.Column('farm_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('area', sa.Float(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),

        sa.PrimaryKeyConstraint('pond_id', name='pk_ponds'),
        sa.ForeignKeyConstraint(['farm_id'], ['farms.farm_id'], name='fk_ponds_farm_id_farms', ondelete='CASCADE'),
        sa.CheckConstraint("status IN ('active', 'inactive', 'maintenance')", name='ck_ponds_status'),
    )
    op.create_index('ix_ponds_farm_id', 'ponds', ['farm_id'])

    op.create_table('scan_results',
        sa.Column('scan_id', sa.String(36), nullable=False),
        sa.Column('pond_id', sa.String(36), nullable=True),
        sa.Column('device_id', sa.String(100), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('health_score', sa.Float(), nullable=True),
        sa.Column('metrics', sa.JSON(), nullable=False),
        sa.Column('disease_prediction', sa.JSON(), nullable=True),
        sa.Column('raw_data', sa.JSON(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('scan_id', name='pk_scan_results'),
        sa.ForeignKeyConstraint(['pond_id'], ['ponds.pond_id'], name='fk_scan_results_pond_id_ponds', ondelete='SET NULL'),
    )
    op.create_index('ix_scan_results_pond_timestamp', 'scan_results', ['pond_id', 'timestamp'])
    op.create_index('ix_scan_results_is_active', 'scan_results', ['is_active'])


def downgrade() -> None:
    """Drop FarmX tables"""
    op.drop_table('scan_results')
    op.drop_table('ponds')
    op.drop_table('farms')
    op.drop_table('subscription_payments')
    op.drop_table('subscriptions')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('products')
    op.drop_table('users')
