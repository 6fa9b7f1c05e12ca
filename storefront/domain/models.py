from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    CASH_ON_DELIVERY = "cash_on_delivery"


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


# Допустимые переходы статусов заказа (для админки)
ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


class User(BaseModel):
    """Domain Entity: пользователь"""
    id: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.CUSTOMER
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class Principal(BaseModel):
    """Учетные данные конкретного запроса"""
    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class CatalogBrand(BaseModel):
    id: str
    brand: str
    description: Optional[str] = None
    logo_uri: Optional[str] = None
    is_active: bool = True


class CatalogType(BaseModel):
    id: str
    type: str
    description: Optional[str] = None
    is_active: bool = True


class CatalogItem(BaseModel):
    """Domain Entity: товар каталога"""
    id: str
    name: str
    description: Optional[str] = None
    price: Decimal
    catalog_type_id: str
    catalog_brand_id: str
    available_stock: int = 0
    is_active: bool = True
    picture_uri: Optional[str] = None
    average_rating: Decimal = Decimal("0.00")
    review_count: int = 0
    brand: Optional[CatalogBrand] = None
    type: Optional[CatalogType] = None
    created_at: datetime
    updated_at: datetime

    def has_stock_for(self, quantity: int) -> bool:
        return self.available_stock >= quantity


class BasketItem(BaseModel):
    """Строка корзины. Цена зафиксирована при добавлении/изменении"""
    id: str
    basket_id: str
    catalog_item_id: str
    quantity: int
    unit_price: Decimal
    product_name: Optional[str] = None
    picture_uri: Optional[str] = None
    current_price: Optional[Decimal] = None
    available_stock: Optional[int] = None


class Basket(BaseModel):
    """Domain Entity: корзина пользователя или анонимной сессии"""
    id: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    is_active: bool = True
    last_modified: datetime
    items: list[BasketItem] = []

    def find_line(self, catalog_item_id: str) -> Optional[BasketItem]:
        for line in self.items:
            if line.catalog_item_id == catalog_item_id:
                return line
        return None

    def is_empty(self) -> bool:
        return not self.items


class OrderItem(BaseModel):
    """Снимок товара на момент оформления заказа"""
    id: str
    order_id: str
    catalog_item_id: str
    product_name: str
    product_description: Optional[str] = None
    unit_price: Decimal
    quantity: int
    picture_uri: Optional[str] = None


class ShippingAddress(BaseModel):
    street: str
    city: str
    state: str
    country: str
    zip_code: str


class Order(BaseModel):
    """Domain Entity: заказ"""
    id: str
    user_id: str
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    shipping_address: ShippingAddress
    notes: Optional[str] = None
    tracking_number: Optional[str] = None
    estimated_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    items: list[OrderItem] = []
    created_at: datetime
    updated_at: datetime

    def belongs_to(self, user_id: str) -> bool:
        return self.user_id == user_id

    def can_be_cancelled(self) -> bool:
        """Бизнес-правило: пользователь может отменить только pending заказ"""
        return self.status == OrderStatus.PENDING

    def can_transition_to(self, status: OrderStatus) -> bool:
        if status == self.status:
            return True
        return status in ORDER_TRANSITIONS[self.status]


class Review(BaseModel):
    id: str
    user_id: str
    catalog_item_id: str
    rating: int
    title: str
    comment: str
    is_verified_purchase: bool = False
    helpful_count: int = 0
    author_first_name: Optional[str] = None
    author_last_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class WishlistItem(BaseModel):
    id: str
    user_id: str
    catalog_item_id: str
    catalog_item: Optional[CatalogItem] = None
    created_at: datetime


class Page(BaseModel):
    """Параметры и результат постраничной выборки"""
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit
