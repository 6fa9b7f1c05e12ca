"""initial storefront schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(*, updated=True):
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now())]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()))
    return columns


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('role', sa.String(32), nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'catalog_brands',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('brand', sa.String(50), nullable=False, unique=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('logo_uri', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False),
        *_timestamps(updated=False),
    )
    op.create_table(
        'catalog_types',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('type', sa.String(50), nullable=False, unique=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False),
        *_timestamps(updated=False),
    )
    op.create_table(
        'catalog_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('catalog_type_id', sa.String(36), sa.ForeignKey('catalog_types.id'), nullable=False),
        sa.Column('catalog_brand_id', sa.String(36), sa.ForeignKey('catalog_brands.id'), nullable=False),
        sa.Column('available_stock', sa.Integer, nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('picture_uri', sa.String(255), nullable=True),
        sa.Column('average_rating', sa.Numeric(3, 2), nullable=False),
        sa.Column('review_count', sa.Integer, nullable=False),
        *_timestamps(),
        sa.CheckConstraint('price >= 0', name='ck_catalog_items_price'),
        sa.CheckConstraint('available_stock >= 0', name='ck_catalog_items_stock'),
    )
    op.create_index('ix_catalog_items_catalog_type_id', 'catalog_items', ['catalog_type_id'])
    op.create_index('ix_catalog_items_catalog_brand_id', 'catalog_items', ['catalog_brand_id'])
    op.create_index('ix_catalog_items_is_active', 'catalog_items', ['is_active'])

    op.create_table(
        'baskets',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('session_id', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('last_modified', sa.DateTime(timezone=True), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint('(user_id IS NULL) <> (session_id IS NULL)', name='ck_baskets_single_owner'),
    )
    op.create_index(
        'uq_baskets_active_user', 'baskets', ['user_id'], unique=True,
        sqlite_where=sa.text('is_active = 1 AND user_id IS NOT NULL'),
        postgresql_where=sa.text('is_active AND user_id IS NOT NULL'),
    )
    op.create_index(
        'uq_baskets_active_session', 'baskets', ['session_id'], unique=True,
        sqlite_where=sa.text('is_active = 1 AND session_id IS NOT NULL'),
        postgresql_where=sa.text('is_active AND session_id IS NOT NULL'),
    )

    op.create_table(
        'basket_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('basket_id', sa.String(36), sa.ForeignKey('baskets.id'), nullable=False),
        sa.Column('catalog_item_id', sa.String(36), sa.ForeignKey('catalog_items.id'), nullable=False),
        sa.Column('quantity', sa.Integer, nullable=False),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint('basket_id', 'catalog_item_id', name='uq_basket_items_product'),
        sa.CheckConstraint('quantity >= 1', name='ck_basket_items_quantity'),
    )

    op.create_table(
        'orders',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('payment_status', sa.String(32), nullable=False),
        sa.Column('payment_method', sa.String(32), nullable=False),
        sa.Column('subtotal', sa.Numeric(10, 2), nullable=False),
        sa.Column('tax', sa.Numeric(10, 2), nullable=False),
        sa.Column('shipping', sa.Numeric(10, 2), nullable=False),
        sa.Column('total', sa.Numeric(10, 2), nullable=False),
        sa.Column('ship_to_street', sa.String(200), nullable=False),
        sa.Column('ship_to_city', sa.String(100), nullable=False),
        sa.Column('ship_to_state', sa.String(100), nullable=False),
        sa.Column('ship_to_country', sa.String(100), nullable=False),
        sa.Column('ship_to_zip_code', sa.String(10), nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('tracking_number', sa.String(50), nullable=True),
        sa.Column('estimated_delivery_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('actual_delivery_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('total >= 0', name='ck_orders_total'),
    )
    op.create_index('ix_orders_user_id', 'orders', ['user_id'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('order_id', sa.String(36), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('catalog_item_id', sa.String(36), sa.ForeignKey('catalog_items.id'), nullable=False),
        sa.Column('product_name', sa.String(255), nullable=False),
        sa.Column('product_description', sa.Text, nullable=True),
        sa.Column('unit_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer, nullable=False),
        sa.Column('picture_uri', sa.String(255), nullable=True),
        sa.CheckConstraint('quantity >= 1', name='ck_order_items_quantity'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    op.create_table(
        'reviews',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('catalog_item_id', sa.String(36), sa.ForeignKey('catalog_items.id'), nullable=False),
        sa.Column('rating', sa.Integer, nullable=False),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('comment', sa.Text, nullable=False),
        sa.Column('is_verified_purchase', sa.Boolean, nullable=False),
        sa.Column('helpful_count', sa.Integer, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'catalog_item_id', name='uq_reviews_user_product'),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating'),
    )
    op.create_index('ix_reviews_catalog_item_id', 'reviews', ['catalog_item_id'])

    op.create_table(
        'wishlists',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('catalog_item_id', sa.String(36), sa.ForeignKey('catalog_items.id'), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint('user_id', 'catalog_item_id', name='uq_wishlists_user_product'),
    )


def downgrade() -> None:
    op.drop_table('wishlists')
    op.drop_table('reviews')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('basket_items')
    op.drop_table('baskets')
    op.drop_table('catalog_items')
    op.drop_table('catalog_types')
    op.drop_table('catalog_brands')
    op.drop_table('users')
