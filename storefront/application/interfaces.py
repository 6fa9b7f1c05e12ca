from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Tuple
from pydantic import BaseModel

from storefront.domain.models import (
    User, CatalogItem, CatalogBrand, CatalogType, Basket, BasketItem,
    Order, OrderStatus, PaymentStatus, Review, WishlistItem,
)


class CatalogFilter(BaseModel):
    brand_id: Optional[str] = None
    type_id: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    search: Optional[str] = None
    sort_by: str = "name"
    sort_order: str = "asc"


class OrderFilter(BaseModel):
    user_id: Optional[str] = None
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def create(self, user: User) -> None:
        pass

    @abstractmethod
    async def update(self, user_id: str, **values) -> None:
        pass


class CatalogRepository(ABC):
    @abstractmethod
    async def get_by_id(self, item_id: str) -> Optional[CatalogItem]:
        pass

    @abstractmethod
    async def get_active(self, item_id: str) -> Optional[CatalogItem]:
        pass

    @abstractmethod
    async def get_many_for_update(self, item_ids: List[str]) -> dict:
        pass

    @abstractmethod
    async def list_active(self, filters: CatalogFilter, page: int, limit: int) -> Tuple[List[CatalogItem], int]:
        pass

    @abstractmethod
    async def create(self, item: CatalogItem) -> None:
        pass

    @abstractmethod
    async def update(self, item_id: str, **values) -> bool:
        pass

    @abstractmethod
    async def decrement_stock(self, item_id: str, quantity: int) -> bool:
        pass

    @abstractmethod
    async def increment_stock(self, item_id: str, quantity: int) -> None:
        pass

    @abstractmethod
    async def list_brands(self) -> List[CatalogBrand]:
        pass

    @abstractmethod
    async def list_types(self) -> List[CatalogType]:
        pass

    @abstractmethod
    async def get_brand(self, brand_id: str) -> Optional[CatalogBrand]:
        pass

    @abstractmethod
    async def get_type(self, type_id: str) -> Optional[CatalogType]:
        pass

    @abstractmethod
    async def create_brand(self, brand: CatalogBrand) -> None:
        pass

    @abstractmethod
    async def create_type(self, catalog_type: CatalogType) -> None:
        pass


class BasketRepository(ABC):
    @abstractmethod
    async def get_active(self, user_id: Optional[str] = None, session_id: Optional[str] = None) -> Optional[Basket]:
        pass

    @abstractmethod
    async def create(self, basket: Basket) -> None:
        pass

    @abstractmethod
    async def add_item(self, item: BasketItem) -> None:
        pass

    @abstractmethod
    async def update_item(self, item_id: str, quantity: int, unit_price: Decimal) -> None:
        pass

    @abstractmethod
    async def delete_item(self, item_id: str) -> None:
        pass

    @abstractmethod
    async def clear(self, basket_id: str) -> None:
        pass

    @abstractmethod
    async def touch(self, basket_id: str) -> None:
        pass

    @abstractmethod
    async def deactivate(self, basket_id: str) -> None:
        pass


class OrderRepository(ABC):
    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def create(self, order: Order) -> None:
        pass

    @abstractmethod
    async def search(self, filters: OrderFilter, page: int, limit: int) -> Tuple[List[Order], int]:
        pass

    @abstractmethod
    async def update_if_status(self, order_id: str, expected_status: OrderStatus, **values) -> bool:
        pass

    @abstractmethod
    async def update(self, order_id: str, **values) -> None:
        pass

    @abstractmethod
    async def has_delivered_item(self, user_id: str, catalog_item_id: str) -> bool:
        pass

    @abstractmethod
    async def statistics(self, start_date: Optional[datetime], end_date: Optional[datetime]) -> dict:
        pass


class ReviewRepository(ABC):
    @abstractmethod
    async def get_by_id(self, review_id: str) -> Optional[Review]:
        pass

    @abstractmethod
    async def get_by_user_and_item(self, user_id: str, catalog_item_id: str) -> Optional[Review]:
        pass

    @abstractmethod
    async def create(self, review: Review) -> None:
        pass

    @abstractmethod
    async def update(self, review_id: str, **values) -> None:
        pass

    @abstractmethod
    async def delete(self, review_id: str) -> None:
        pass

    @abstractmethod
    async def list_for_item(
        self, catalog_item_id: str, sort_by: str, sort_order: str, page: int, limit: int
    ) -> Tuple[List[Review], int]:
        pass

    @abstractmethod
    async def rating_distribution(self, catalog_item_id: str) -> dict:
        pass

    @abstractmethod
    async def aggregate(self, catalog_item_id: str) -> Tuple[Decimal, int]:
        pass

    @abstractmethod
    async def increment_helpful(self, review_id: str) -> None:
        pass


class WishlistRepository(ABC):
    @abstractmethod
    async def get_by_id(self, wishlist_id: str) -> Optional[WishlistItem]:
        pass

    @abstractmethod
    async def get_by_user_and_item(self, user_id: str, catalog_item_id: str) -> Optional[WishlistItem]:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str, page: int, limit: int) -> Tuple[List[WishlistItem], int]:
        pass

    @abstractmethod
    async def create(self, item: WishlistItem) -> None:
        pass

    @abstractmethod
    async def delete(self, wishlist_id: str) -> None:
        pass

    @abstractmethod
    async def clear(self, user_id: str) -> None:
        pass

