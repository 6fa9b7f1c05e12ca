from sqlalchemy import (
    Table, Column, String, Integer, Numeric, Boolean, Text, Enum, DateTime,
    ForeignKey, MetaData, CheckConstraint, UniqueConstraint, Index, text,
)
from sqlalchemy.sql import func

from storefront.domain.models import OrderStatus, PaymentStatus, PaymentMethod, UserRole

metadata = MetaData()


def _enum(enum_cls):
    """Храним значения enum ("pending"), а не имена ("PENDING")"""
    return Enum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        validate_strings=True,
        length=32,
    )


users_tbl = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), unique=True, nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("first_name", String(50), nullable=False),
    Column("last_name", String(50), nullable=False),
    Column("role", _enum(UserRole), nullable=False, default=UserRole.CUSTOMER),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("last_login_at", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
)


catalog_brands_tbl = Table(
    "catalog_brands",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("brand", String(50), unique=True, nullable=False),
    Column("description", Text, nullable=True),
    Column("logo_uri", String(255), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)


catalog_types_tbl = Table(
    "catalog_types",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("type", String(50), unique=True, nullable=False),
    Column("description", Text, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)


catalog_items_tbl = Table(
    "catalog_items",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("price", Numeric(10, 2), nullable=False),
    Column("catalog_type_id", String(36), ForeignKey("catalog_types.id"), nullable=False, index=True),
    Column("catalog_brand_id", String(36), ForeignKey("catalog_brands.id"), nullable=False, index=True),
    Column("available_stock", Integer, nullable=False, default=0),
    Column("is_active", Boolean, nullable=False, default=True, index=True),
    Column("picture_uri", String(255), nullable=True),
    Column("average_rating", Numeric(3, 2), nullable=False, default=0),
    Column("review_count", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
    CheckConstraint("price >= 0", name="ck_catalog_items_price"),
    CheckConstraint("available_stock >= 0", name="ck_catalog_items_stock"),
)


baskets_tbl = Table(
    "baskets",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=True),
    Column("session_id", String(255), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("last_modified", DateTime(timezone=True), nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    CheckConstraint(
        "(user_id IS NULL) <> (session_id IS NULL)", name="ck_baskets_single_owner"
    ),
    # Одна активная корзина на владельца
    Index(
        "uq_baskets_active_user", "user_id", unique=True,
        sqlite_where=text("is_active = 1 AND user_id IS NOT NULL"),
        postgresql_where=text("is_active AND user_id IS NOT NULL"),
    ),
    Index(
        "uq_baskets_active_session", "session_id", unique=True,
        sqlite_where=text("is_active = 1 AND session_id IS NOT NULL"),
        postgresql_where=text("is_active AND session_id IS NOT NULL"),
    ),
)


basket_items_tbl = Table(
    "basket_items",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("basket_id", String(36), ForeignKey("baskets.id"), nullable=False),
    Column("catalog_item_id", String(36), ForeignKey("catalog_items.id"), nullable=False),
    Column("quantity", Integer, nullable=False, default=1),
    Column("unit_price", Numeric(10, 2), nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    UniqueConstraint("basket_id", "catalog_item_id", name="uq_basket_items_product"),
    CheckConstraint("quantity >= 1", name="ck_basket_items_quantity"),
)


orders_tbl = Table(
    "orders",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False, index=True),
    Column("status", _enum(OrderStatus), nullable=False, default=OrderStatus.PENDING),
    Column("payment_status", _enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING),
    Column("payment_method", _enum(PaymentMethod), nullable=False),
    Column("subtotal", Numeric(10, 2), nullable=False),
    Column("tax", Numeric(10, 2), nullable=False, default=0),
    Column("shipping", Numeric(10, 2), nullable=False, default=0),
    Column("total", Numeric(10, 2), nullable=False),
    Column("ship_to_street", String(200), nullable=False),
    Column("ship_to_city", String(100), nullable=False),
    Column("ship_to_state", String(100), nullable=False),
    Column("ship_to_country", String(100), nullable=False),
    Column("ship_to_zip_code", String(10), nullable=False),
    Column("notes", Text, nullable=True),
    Column("tracking_number", String(50), nullable=True),
    Column("estimated_delivery_date", DateTime(timezone=True), nullable=True),
    Column("actual_delivery_date", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
    CheckConstraint("total >= 0", name="ck_orders_total"),
)


order_items_tbl = Table(
    "order_items",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("order_id", String(36), ForeignKey("orders.id"), nullable=False, index=True),
    Column("catalog_item_id", String(36), ForeignKey("catalog_items.id"), nullable=False),
    Column("product_name", String(255), nullable=False),
    Column("product_description", Text, nullable=True),
    Column("unit_price", Numeric(10, 2), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("picture_uri", String(255), nullable=True),
    CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
)


reviews_tbl = Table(
    "reviews",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False),
    Column("catalog_item_id", String(36), ForeignKey("catalog_items.id"), nullable=False, index=True),
    Column("rating", Integer, nullable=False),
    Column("title", String(100), nullable=False),
    Column("comment", Text, nullable=False),
    Column("is_verified_purchase", Boolean, nullable=False, default=False),
    Column("helpful_count", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
    UniqueConstraint("user_id", "catalog_item_id", name="uq_reviews_user_product"),
    CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),
)


wishlists_tbl = Table(
    "wishlists",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False),
    Column("catalog_item_id", String(36), ForeignKey("catalog_items.id"), nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    UniqueConstraint("user_id", "catalog_item_id", name="uq_wishlists_user_product"),
)
