"""Pytest fixtures for storefront tests."""

import os
import uuid
from datetime import datetime, timezone
from decimal import Decimal

# Настройки должны быть выставлены до импорта storefront.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from storefront.database import get_session_factory
from storefront.domain.models import OrderStatus, PaymentMethod, PaymentStatus, User, UserRole
from storefront.infrastructure.db_schema import (
    metadata, users_tbl, catalog_brands_tbl, catalog_types_tbl, catalog_items_tbl,
    orders_tbl, order_items_tbl,
)
from storefront.infrastructure.security import create_access_token, hash_password
from storefront.main import app

SHIPPING_ADDRESS = {
    "street": "221B Baker Street",
    "city": "London",
    "state": "Greater London",
    "country": "United Kingdom",
    "zip_code": "12345",
}


class Seeder:
    """Прямой доступ к тестовой базе: наполнение и проверка состояния"""

    def __init__(self, engine):
        self.engine = engine
        self._brand_id = None
        self._type_id = None

    def user(self, email="buyer@example.com", password="Secret123", role=UserRole.CUSTOMER,
             is_active=True, first_name="Test", last_name="Buyer") -> User:
        now = datetime.now(timezone.utc)
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        with self.engine.begin() as conn:
            conn.execute(insert(users_tbl).values(**user.model_dump()))
        return user

    def admin(self) -> User:
        return self.user(email="admin@example.com", role=UserRole.ADMIN, first_name="Shop", last_name="Admin")

    @staticmethod
    def auth(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    def brand(self, name="Acme") -> str:
        brand_id = str(uuid.uuid4())
        with self.engine.begin() as conn:
            conn.execute(insert(catalog_brands_tbl).values(id=brand_id, brand=name, is_active=True))
        return brand_id

    def catalog_type(self, name="Gadgets") -> str:
        type_id = str(uuid.uuid4())
        with self.engine.begin() as conn:
            conn.execute(insert(catalog_types_tbl).values(id=type_id, type=name, is_active=True))
        return type_id

    def item(self, name="Widget", price="50.00", stock=10, is_active=True, description=None) -> str:
        if not self._brand_id:
            self._brand_id = self.brand()
            self._type_id = self.catalog_type()
        item_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        with self.engine.begin() as conn:
            conn.execute(insert(catalog_items_tbl).values(
                id=item_id,
                name=name,
                description=description,
                price=Decimal(price),
                catalog_type_id=self._type_id,
                catalog_brand_id=self._brand_id,
                available_stock=stock,
                is_active=is_active,
                average_rating=Decimal("0"),
                review_count=0,
                created_at=now,
                updated_at=now,
            ))
        return item_id

    def delivered_order(self, user: User, item_id: str, quantity=1) -> str:
        order_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        with self.engine.begin() as conn:
            conn.execute(insert(orders_tbl).values(
                id=order_id,
                user_id=user.id,
                status=OrderStatus.DELIVERED,
                payment_status=PaymentStatus.COMPLETED,
                payment_method=PaymentMethod.CREDIT_CARD,
                subtotal=Decimal("10.00"),
                tax=Decimal("0.80"),
                shipping=Decimal("10.00"),
                total=Decimal("20.80"),
                ship_to_street=SHIPPING_ADDRESS["street"],
                ship_to_city=SHIPPING_ADDRESS["city"],
                ship_to_state=SHIPPING_ADDRESS["state"],
                ship_to_country=SHIPPING_ADDRESS["country"],
                ship_to_zip_code=SHIPPING_ADDRESS["zip_code"],
                created_at=now,
                updated_at=now,
            ))
            conn.execute(insert(order_items_tbl).values(
                id=str(uuid.uuid4()),
                order_id=order_id,
                catalog_item_id=item_id,
                product_name="Delivered product",
                unit_price=Decimal("10.00"),
                quantity=quantity,
            ))
        return order_id

    def stock(self, item_id: str) -> int:
        with self.engine.connect() as conn:
            return conn.execute(
                select(catalog_items_tbl.c.available_stock).where(catalog_items_tbl.c.id == item_id)
            ).scalar_one()

    def set_stock(self, item_id: str, stock: int) -> None:
        with self.engine.begin() as conn:
            conn.execute(
                update(catalog_items_tbl).where(catalog_items_tbl.c.id == item_id).values(available_stock=stock)
            )

    def count(self, table) -> int:
        with self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(table)).scalar_one()

    def row(self, table, row_id: str):
        with self.engine.connect() as conn:
            return conn.execute(select(table).where(table.c.id == row_id)).fetchone()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "storefront.sqlite"


@pytest.fixture
def sync_engine(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seed(sync_engine):
    return Seeder(sync_engine)


@pytest.fixture
def session_factory(sync_engine, db_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def client(session_factory):
    """TestClient поверх отдельной базы на каждый тест"""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def buyer(seed):
    return seed.user()


@pytest.fixture
def buyer_headers(seed, buyer):
    return seed.auth(buyer)


@pytest.fixture
def admin_headers(seed):
    return seed.auth(seed.admin())
