from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List, Tuple
from sqlalchemy import select, insert, update, delete, func, or_, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.models import (
    User, CatalogItem, CatalogBrand, CatalogType, Basket, BasketItem,
    Order, OrderItem, OrderStatus, PaymentStatus, ShippingAddress, Review, WishlistItem,
)
from storefront.domain.pricing import money
from storefront.infrastructure.db_schema import (
    users_tbl, catalog_brands_tbl, catalog_types_tbl, catalog_items_tbl,
    baskets_tbl, basket_items_tbl, orders_tbl, order_items_tbl, reviews_tbl, wishlists_tbl,
)
from storefront.application.interfaces import (
    UserRepository, CatalogRepository, BasketRepository, OrderRepository,
    ReviewRepository, WishlistRepository, CatalogFilter, OrderFilter,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def _count(session: AsyncSession, stmt) -> int:
    result = await session.execute(select(func.count()).select_from(stmt.order_by(None).subquery()))
    return result.scalar_one()


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        result = await self._session.execute(select(users_tbl).where(users_tbl.c.id == user_id))
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(users_tbl).where(users_tbl.c.email == email.lower())
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def create(self, user: User) -> None:
        await self._session.execute(insert(users_tbl).values(**user.model_dump()))

    async def update(self, user_id: str, **values) -> None:
        stmt = (
            update(users_tbl)
            .where(users_tbl.c.id == user_id)
            .values(**values, updated_at=_now())
        )
        await self._session.execute(stmt)

    def _to_domain(self, row) -> User:
        return User(**row._mapping)


class SQLAlchemyCatalogRepository(CatalogRepository):
    SORT_COLUMNS = {
        "name": catalog_items_tbl.c.name,
        "price": catalog_items_tbl.c.price,
        "created_at": catalog_items_tbl.c.created_at,
        "average_rating": catalog_items_tbl.c.average_rating,
    }

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _select():
        return (
            select(
                catalog_items_tbl,
                catalog_brands_tbl.c.brand.label("brand_name"),
                catalog_brands_tbl.c.description.label("brand_description"),
                catalog_types_tbl.c.type.label("type_name"),
                catalog_types_tbl.c.description.label("type_description"),
            )
            .outerjoin(catalog_brands_tbl, catalog_brands_tbl.c.id == catalog_items_tbl.c.catalog_brand_id)
            .outerjoin(catalog_types_tbl, catalog_types_tbl.c.id == catalog_items_tbl.c.catalog_type_id)
        )

    async def get_by_id(self, item_id: str) -> Optional[CatalogItem]:
        result = await self._session.execute(self._select().where(catalog_items_tbl.c.id == item_id))
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def get_active(self, item_id: str) -> Optional[CatalogItem]:
        result = await self._session.execute(
            self._select().where(
                catalog_items_tbl.c.id == item_id,
                catalog_items_tbl.c.is_active.is_(True),
            )
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def get_many_for_update(self, item_ids: List[str]) -> dict:
        """Блокирует строки товаров до конца транзакции (SELECT ... FOR UPDATE)"""
        result = await self._session.execute(
            select(catalog_items_tbl)
            .where(catalog_items_tbl.c.id.in_(item_ids))
            .with_for_update()
        )
        return {row.id: self._to_domain(row) for row in result.fetchall()}

    async def list_active(self, filters: CatalogFilter, page: int, limit: int) -> Tuple[List[CatalogItem], int]:
        stmt = self._select().where(catalog_items_tbl.c.is_active.is_(True))
        if filters.brand_id:
            stmt = stmt.where(catalog_items_tbl.c.catalog_brand_id == filters.brand_id)
        if filters.type_id:
            stmt = stmt.where(catalog_items_tbl.c.catalog_type_id == filters.type_id)
        if filters.min_price is not None:
            stmt = stmt.where(catalog_items_tbl.c.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(catalog_items_tbl.c.price <= filters.max_price)
        if filters.search:
            pattern = f"%{filters.search}%"
            stmt = stmt.where(or_(
                catalog_items_tbl.c.name.ilike(pattern),
                catalog_items_tbl.c.description.ilike(pattern),
            ))

        total = await _count(self._session, stmt)

        column = self.SORT_COLUMNS.get(filters.sort_by, catalog_items_tbl.c.name)
        direction = desc if filters.sort_order.lower() == "desc" else asc
        result = await self._session.execute(
            stmt.order_by(direction(column), catalog_items_tbl.c.id)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return [self._to_domain(row) for row in result.fetchall()], total

    async def create(self, item: CatalogItem) -> None:
        values = item.model_dump(exclude={"brand", "type"})
        await self._session.execute(insert(catalog_items_tbl).values(**values))

    async def update(self, item_id: str, **values) -> bool:
        stmt = (
            update(catalog_items_tbl)
            .where(catalog_items_tbl.c.id == item_id)
            .values(**values, updated_at=_now())
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def decrement_stock(self, item_id: str, quantity: int) -> bool:
        """Списание остатка. False, если остатка не хватило (конкурентный заказ успел раньше)"""
        stmt = (
            update(catalog_items_tbl)
            .where(
                catalog_items_tbl.c.id == item_id,
                catalog_items_tbl.c.available_stock >= quantity,
            )
            .values(
                available_stock=catalog_items_tbl.c.available_stock - quantity,
                updated_at=_now(),
            )
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def increment_stock(self, item_id: str, quantity: int) -> None:
        stmt = (
            update(catalog_items_tbl)
            .where(catalog_items_tbl.c.id == item_id)
            .values(
                available_stock=catalog_items_tbl.c.available_stock + quantity,
                updated_at=_now(),
            )
        )
        await self._session.execute(stmt)

    async def list_brands(self) -> List[CatalogBrand]:
        result = await self._session.execute(
            select(catalog_brands_tbl).order_by(catalog_brands_tbl.c.brand.asc())
        )
        return [self._brand_to_domain(row) for row in result.fetchall()]

    async def list_types(self) -> List[CatalogType]:
        result = await self._session.execute(
            select(catalog_types_tbl).order_by(catalog_types_tbl.c.type.asc())
        )
        return [self._type_to_domain(row) for row in result.fetchall()]

    async def get_brand(self, brand_id: str) -> Optional[CatalogBrand]:
        result = await self._session.execute(
            select(catalog_brands_tbl).where(catalog_brands_tbl.c.id == brand_id)
        )
        row = result.fetchone()
        return self._brand_to_domain(row) if row else None

    async def get_type(self, type_id: str) -> Optional[CatalogType]:
        result = await self._session.execute(
            select(catalog_types_tbl).where(catalog_types_tbl.c.id == type_id)
        )
        row = result.fetchone()
        return self._type_to_domain(row) if row else None

    async def create_brand(self, brand: CatalogBrand) -> None:
        await self._session.execute(
            insert(catalog_brands_tbl).values(**brand.model_dump(), created_at=_now())
        )

    async def create_type(self, catalog_type: CatalogType) -> None:
        await self._session.execute(
            insert(catalog_types_tbl).values(**catalog_type.model_dump(), created_at=_now())
        )

    def _to_domain(self, row) -> CatalogItem:
        """Трансформация DB → Domain"""
        mapping = row._mapping
        brand = None
        if mapping.get("brand_name") is not None:
            brand = CatalogBrand(
                id=row.catalog_brand_id,
                brand=mapping["brand_name"],
                description=mapping.get("brand_description"),
            )
        catalog_type = None
        if mapping.get("type_name") is not None:
            catalog_type = CatalogType(
                id=row.catalog_type_id,
                type=mapping["type_name"],
                description=mapping.get("type_description"),
            )
        return CatalogItem(
            id=row.id,
            name=row.name,
            description=row.description,
            price=money(row.price),
            catalog_type_id=row.catalog_type_id,
            catalog_brand_id=row.catalog_brand_id,
            available_stock=row.available_stock,
            is_active=row.is_active,
            picture_uri=row.picture_uri,
            average_rating=money(row.average_rating or 0),
            review_count=row.review_count or 0,
            brand=brand,
            type=catalog_type,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _brand_to_domain(row) -> CatalogBrand:
        return CatalogBrand(
            id=row.id, brand=row.brand, description=row.description,
            logo_uri=row.logo_uri, is_active=row.is_active,
        )

    @staticmethod
    def _type_to_domain(row) -> CatalogType:
        return CatalogType(
            id=row.id, type=row.type, description=row.description, is_active=row.is_active,
        )


class SQLAlchemyBasketRepository(BasketRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_active(self, user_id: Optional[str] = None, session_id: Optional[str] = None) -> Optional[Basket]:
        stmt = select(baskets_tbl).where(baskets_tbl.c.is_active.is_(True))
        if user_id:
            stmt = stmt.where(baskets_tbl.c.user_id == user_id)
        elif session_id:
            stmt = stmt.where(baskets_tbl.c.session_id == session_id)
        else:
            return None

        result = await self._session.execute(stmt)
        row = result.fetchone()
        if not row:
            return None
        return Basket(
            id=row.id,
            user_id=row.user_id,
            session_id=row.session_id,
            is_active=row.is_active,
            last_modified=row.last_modified,
            items=await self._load_items(row.id),
        )

    async def _load_items(self, basket_id: str) -> List[BasketItem]:
        result = await self._session.execute(
            select(
                basket_items_tbl,
                catalog_items_tbl.c.name.label("product_name"),
                catalog_items_tbl.c.picture_uri,
                catalog_items_tbl.c.price.label("current_price"),
                catalog_items_tbl.c.available_stock,
            )
            .join(catalog_items_tbl, catalog_items_tbl.c.id == basket_items_tbl.c.catalog_item_id)
            .where(basket_items_tbl.c.basket_id == basket_id)
            .order_by(basket_items_tbl.c.created_at.asc())
        )
        return [
            BasketItem(
                id=row.id,
                basket_id=row.basket_id,
                catalog_item_id=row.catalog_item_id,
                quantity=row.quantity,
                unit_price=money(row.unit_price),
                product_name=row.product_name,
                picture_uri=row.picture_uri,
                current_price=money(row.current_price),
                available_stock=row.available_stock,
            )
            for row in result.fetchall()
        ]

    async def create(self, basket: Basket) -> None:
        stmt = insert(baskets_tbl).values(
            id=basket.id,
            user_id=basket.user_id,
            session_id=basket.session_id,
            is_active=basket.is_active,
            last_modified=basket.last_modified,
            created_at=basket.last_modified,
        )
        await self._session.execute(stmt)

    async def add_item(self, item: BasketItem) -> None:
        stmt = insert(basket_items_tbl).values(
            id=item.id,
            basket_id=item.basket_id,
            catalog_item_id=item.catalog_item_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            created_at=_now(),
        )
        await self._session.execute(stmt)

    async def update_item(self, item_id: str, quantity: int, unit_price: Decimal) -> None:
        stmt = (
            update(basket_items_tbl)
            .where(basket_items_tbl.c.id == item_id)
            .values(quantity=quantity, unit_price=unit_price)
        )
        await self._session.execute(stmt)

    async def delete_item(self, item_id: str) -> None:
        await self._session.execute(delete(basket_items_tbl).where(basket_items_tbl.c.id == item_id))

    async def clear(self, basket_id: str) -> None:
        await self._session.execute(
            delete(basket_items_tbl).where(basket_items_tbl.c.basket_id == basket_id)
        )

    async def touch(self, basket_id: str) -> None:
        await self._session.execute(
            update(baskets_tbl).where(baskets_tbl.c.id == basket_id).values(last_modified=_now())
        )

    async def deactivate(self, basket_id: str) -> None:
        await self._session.execute(
            update(baskets_tbl)
            .where(baskets_tbl.c.id == basket_id)
            .values(is_active=False, last_modified=_now())
        )


class SQLAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        result = await self._session.execute(select(orders_tbl).where(orders_tbl.c.id == order_id))
        row = result.fetchone()
        if not row:
            return None
        items = await self._load_items([row.id])
        return self._to_domain(row, items.get(row.id, []))

    async def create(self, order: Order) -> None:
        address = order.shipping_address
        stmt = insert(orders_tbl).values(
            id=order.id,
            user_id=order.user_id,
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            subtotal=order.subtotal,
            tax=order.tax,
            shipping=order.shipping,
            total=order.total,
            ship_to_street=address.street,
            ship_to_city=address.city,
            ship_to_state=address.state,
            ship_to_country=address.country,
            ship_to_zip_code=address.zip_code,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
        await self._session.execute(stmt)
        if order.items:
            await self._session.execute(
                insert(order_items_tbl),
                [item.model_dump() for item in order.items],
            )

    async def search(self, filters: OrderFilter, page: int, limit: int) -> Tuple[List[Order], int]:
        stmt = select(orders_tbl)
        if filters.search:
            pattern = f"%{filters.search}%"
            stmt = stmt.join(users_tbl, users_tbl.c.id == orders_tbl.c.user_id).where(or_(
                users_tbl.c.email.ilike(pattern),
                users_tbl.c.first_name.ilike(pattern),
                users_tbl.c.last_name.ilike(pattern),
            ))
        for condition in self._conditions(filters):
            stmt = stmt.where(condition)

        total = await _count(self._session, stmt)

        result = await self._session.execute(
            stmt.order_by(orders_tbl.c.created_at.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = result.fetchall()
        items = await self._load_items([row.id for row in rows])
        return [self._to_domain(row, items.get(row.id, [])) for row in rows], total

    async def update_if_status(self, order_id: str, expected_status: OrderStatus, **values) -> bool:
        """Условное обновление: если статус уже изменен параллельно, затронет 0 строк"""
        stmt = (
            update(orders_tbl)
            .where(orders_tbl.c.id == order_id, orders_tbl.c.status == expected_status)
            .values(**values, updated_at=_now())
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def update(self, order_id: str, **values) -> None:
        stmt = (
            update(orders_tbl)
            .where(orders_tbl.c.id == order_id)
            .values(**values, updated_at=_now())
        )
        await self._session.execute(stmt)

    async def has_delivered_item(self, user_id: str, catalog_item_id: str) -> bool:
        result = await self._session.execute(
            select(order_items_tbl.c.id)
            .join(orders_tbl, orders_tbl.c.id == order_items_tbl.c.order_id)
            .where(
                orders_tbl.c.user_id == user_id,
                orders_tbl.c.status == OrderStatus.DELIVERED,
                order_items_tbl.c.catalog_item_id == catalog_item_id,
            )
            .limit(1)
        )
        return result.fetchone() is not None

    async def statistics(self, start_date: Optional[datetime], end_date: Optional[datetime]) -> dict:
        conditions = self._conditions(OrderFilter(start_date=start_date, end_date=end_date))

        def scoped(stmt):
            for condition in conditions:
                stmt = stmt.where(condition)
            return stmt

        total_orders = (await self._session.execute(
            scoped(select(func.count()).select_from(orders_tbl))
        )).scalar_one()
        total_revenue = (await self._session.execute(
            scoped(select(func.coalesce(func.sum(orders_tbl.c.total), 0)))
        )).scalar_one()
        by_status = (await self._session.execute(
            scoped(
                select(
                    orders_tbl.c.status,
                    func.count().label("orders_count"),
                    func.coalesce(func.sum(orders_tbl.c.total), 0).label("revenue"),
                ).group_by(orders_tbl.c.status)
            )
        )).fetchall()
        recent = (await self._session.execute(
            scoped(select(orders_tbl)).order_by(orders_tbl.c.created_at.desc()).limit(10)
        )).fetchall()

        return {
            "total_orders": total_orders,
            "total_revenue": money(total_revenue or 0),
            "orders_by_status": [
                {"status": OrderStatus(row.status), "count": row.orders_count, "revenue": money(row.revenue or 0)}
                for row in by_status
            ],
            "recent_orders": [self._to_domain(row, []) for row in recent],
        }

    @staticmethod
    def _conditions(filters: OrderFilter) -> list:
        conditions = []
        if filters.user_id:
            conditions.append(orders_tbl.c.user_id == filters.user_id)
        if filters.status:
            conditions.append(orders_tbl.c.status == filters.status)
        if filters.payment_status:
            conditions.append(orders_tbl.c.payment_status == filters.payment_status)
        if filters.start_date:
            conditions.append(orders_tbl.c.created_at >= filters.start_date)
        if filters.end_date:
            conditions.append(orders_tbl.c.created_at <= filters.end_date)
        return conditions

    async def _load_items(self, order_ids: List[str]) -> dict:
        if not order_ids:
            return {}
        result = await self._session.execute(
            select(order_items_tbl).where(order_items_tbl.c.order_id.in_(order_ids))
        )
        items = {}
        for row in result.fetchall():
            items.setdefault(row.order_id, []).append(OrderItem(
                id=row.id,
                order_id=row.order_id,
                catalog_item_id=row.catalog_item_id,
                product_name=row.product_name,
                product_description=row.product_description,
                unit_price=money(row.unit_price),
                quantity=row.quantity,
                picture_uri=row.picture_uri,
            ))
        return items

    def _to_domain(self, row, items: List[OrderItem]) -> Order:
        """Трансформация DB → Domain"""
        return Order(
            id=row.id,
            user_id=row.user_id,
            status=OrderStatus(row.status),
            payment_status=PaymentStatus(row.payment_status),
            payment_method=row.payment_method,
            subtotal=money(row.subtotal),
            tax=money(row.tax),
            shipping=money(row.shipping),
            total=money(row.total),
            shipping_address=ShippingAddress(
                street=row.ship_to_street,
                city=row.ship_to_city,
                state=row.ship_to_state,
                country=row.ship_to_country,
                zip_code=row.ship_to_zip_code,
            ),
            notes=row.notes,
            tracking_number=row.tracking_number,
            estimated_delivery_date=row.estimated_delivery_date,
            actual_delivery_date=row.actual_delivery_date,
            items=items,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class SQLAlchemyReviewRepository(ReviewRepository):
    SORT_COLUMNS = {
        "created_at": reviews_tbl.c.created_at,
        "rating": reviews_tbl.c.rating,
        "helpful_count": reviews_tbl.c.helpful_count,
    }

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _select():
        return (
            select(
                reviews_tbl,
                users_tbl.c.first_name.label("author_first_name"),
                users_tbl.c.last_name.label("author_last_name"),
            )
            .outerjoin(users_tbl, users_tbl.c.id == reviews_tbl.c.user_id)
        )

    async def get_by_id(self, review_id: str) -> Optional[Review]:
        result = await self._session.execute(self._select().where(reviews_tbl.c.id == review_id))
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def get_by_user_and_item(self, user_id: str, catalog_item_id: str) -> Optional[Review]:
        result = await self._session.execute(
            self._select().where(
                reviews_tbl.c.user_id == user_id,
                reviews_tbl.c.catalog_item_id == catalog_item_id,
            )
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def create(self, review: Review) -> None:
        values = review.model_dump(exclude={"author_first_name", "author_last_name"})
        await self._session.execute(insert(reviews_tbl).values(**values))

    async def update(self, review_id: str, **values) -> None:
        await self._session.execute(
            update(reviews_tbl)
            .where(reviews_tbl.c.id == review_id)
            .values(**values, updated_at=_now())
        )

    async def delete(self, review_id: str) -> None:
        await self._session.execute(delete(reviews_tbl).where(reviews_tbl.c.id == review_id))

    async def list_for_item(
        self, catalog_item_id: str, sort_by: str, sort_order: str, page: int, limit: int
    ) -> Tuple[List[Review], int]:
        stmt = self._select().where(reviews_tbl.c.catalog_item_id == catalog_item_id)
        total = await _count(self._session, stmt)

        column = self.SORT_COLUMNS.get(sort_by, reviews_tbl.c.created_at)
        direction = asc if sort_order.lower() == "asc" else desc
        result = await self._session.execute(
            stmt.order_by(direction(column), reviews_tbl.c.id)
            .limit(limit)
            .offset((page - 1) * limit)
        )
        return [self._to_domain(row) for row in result.fetchall()], total

    async def rating_distribution(self, catalog_item_id: str) -> dict:
        result = await self._session.execute(
            select(reviews_tbl.c.rating, func.count().label("reviews_count"))
            .where(reviews_tbl.c.catalog_item_id == catalog_item_id)
            .group_by(reviews_tbl.c.rating)
            .order_by(reviews_tbl.c.rating.desc())
        )
        return {row.rating: row.reviews_count for row in result.fetchall()}

    async def aggregate(self, catalog_item_id: str) -> Tuple[Decimal, int]:
        result = await self._session.execute(
            select(func.avg(reviews_tbl.c.rating), func.count())
            .where(reviews_tbl.c.catalog_item_id == catalog_item_id)
        )
        average, count = result.one()
        return money(average or 0), count

    async def increment_helpful(self, review_id: str) -> None:
        await self._session.execute(
            update(reviews_tbl)
            .where(reviews_tbl.c.id == review_id)
            .values(helpful_count=reviews_tbl.c.helpful_count + 1)
        )

    def _to_domain(self, row) -> Review:
        return Review(**row._mapping)


class SQLAlchemyWishlistRepository(WishlistRepository):
    def __init__(self, session: AsyncSession):
        self._session = session
        self._catalog = SQLAlchemyCatalogRepository(session)

    async def get_by_id(self, wishlist_id: str) -> Optional[WishlistItem]:
        result = await self._session.execute(
            select(wishlists_tbl).where(wishlists_tbl.c.id == wishlist_id)
        )
        row = result.fetchone()
        return WishlistItem(**row._mapping) if row else None

    async def get_by_user_and_item(self, user_id: str, catalog_item_id: str) -> Optional[WishlistItem]:
        result = await self._session.execute(
            select(wishlists_tbl).where(
                wishlists_tbl.c.user_id == user_id,
                wishlists_tbl.c.catalog_item_id == catalog_item_id,
            )
        )
        row = result.fetchone()
        return WishlistItem(**row._mapping) if row else None

    async def list_for_user(self, user_id: str, page: int, limit: int) -> Tuple[List[WishlistItem], int]:
        # Только активные товары
        stmt = (
            select(wishlists_tbl)
            .join(catalog_items_tbl, catalog_items_tbl.c.id == wishlists_tbl.c.catalog_item_id)
            .where(
                wishlists_tbl.c.user_id == user_id,
                catalog_items_tbl.c.is_active.is_(True),
            )
        )
        total = await _count(self._session, stmt)

        result = await self._session.execute(
            stmt.order_by(wishlists_tbl.c.created_at.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = result.fetchall()

        products = {}
        if rows:
            products_result = await self._session.execute(
                self._catalog._select().where(
                    catalog_items_tbl.c.id.in_([row.catalog_item_id for row in rows])
                )
            )
            products = {
                row.id: self._catalog._to_domain(row) for row in products_result.fetchall()
            }

        return [
            WishlistItem(**row._mapping, catalog_item=products.get(row.catalog_item_id))
            for row in rows
        ], total

    async def create(self, item: WishlistItem) -> None:
        await self._session.execute(
            insert(wishlists_tbl).values(**item.model_dump(exclude={"catalog_item"}))
        )

    async def delete(self, wishlist_id: str) -> None:
        await self._session.execute(delete(wishlists_tbl).where(wishlists_tbl.c.id == wishlist_id))

    async def clear(self, user_id: str) -> None:
        await self._session.execute(delete(wishlists_tbl).where(wishlists_tbl.c.user_id == user_id))
