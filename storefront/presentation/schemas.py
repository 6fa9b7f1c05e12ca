import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional, List
from pydantic import AfterValidator, BaseModel, Field, PlainSerializer

from storefront.domain.models import (
    OrderStatus, PaymentStatus, PaymentMethod, UserRole, Page,
)

# Денежные суммы отдаются числом, а не строкой
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _check_password(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError("Пароль должен содержать строчную и заглавную букву и цифру")
    return value


def _check_name(value: str) -> str:
    value = value.strip()
    if not 2 <= len(value) <= 50:
        raise ValueError("Длина имени от 2 до 50 символов")
    if not NAME_PATTERN.match(value):
        raise ValueError("Имя может содержать только буквы и пробелы")
    return value


Password = Annotated[str, Field(min_length=6, max_length=72), AfterValidator(_check_password)]
PersonName = Annotated[str, AfterValidator(_check_name)]


class ErrorResponse(BaseModel):
    detail: str


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_domain(cls, page: Page):
        return cls(
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
            has_next=page.page < page.total_pages,
            has_previous=page.page > 1,
        )


# --- Auth ---

class RegisterRequest(BaseModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    password: Password
    first_name: PersonName
    last_name: PersonName


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=72)


class UpdateProfileRequest(BaseModel):
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1, max_length=72)
    new_password: Password


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, user):
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            is_active=user.is_active,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
        )


class TokenResponse(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse

    @classmethod
    def from_domain(cls, result):
        return cls(
            access_token=result.access_token,
            token_type=result.token_type,
            user=UserResponse.from_domain(result.user),
        )


# --- Catalog ---

class BrandResponse(BaseModel):
    id: str
    brand: str
    description: Optional[str] = None
    logo_uri: Optional[str] = None


class TypeResponse(BaseModel):
    id: str
    type: str
    description: Optional[str] = None


class CreateBrandRequest(BaseModel):
    brand: str = Field(min_length=2, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    logo_uri: Optional[str] = Field(default=None, max_length=255)


class CreateTypeRequest(BaseModel):
    type: str = Field(min_length=2, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)


class CatalogItemRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    catalog_type_id: str
    catalog_brand_id: str
    available_stock: int = Field(default=0, ge=0)
    picture_uri: Optional[str] = Field(default=None, max_length=255)


class CatalogItemUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    catalog_type_id: Optional[str] = None
    catalog_brand_id: Optional[str] = None
    available_stock: Optional[int] = Field(default=None, ge=0)
    picture_uri: Optional[str] = Field(default=None, max_length=255)
    is_active: Optional[bool] = None


class CatalogItemResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: Money
    catalog_type_id: str
    catalog_brand_id: str
    available_stock: int
    is_active: bool
    picture_uri: Optional[str] = None
    average_rating: Money
    review_count: int
    brand: Optional[BrandResponse] = None
    type: Optional[TypeResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, item):
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            price=item.price,
            catalog_type_id=item.catalog_type_id,
            catalog_brand_id=item.catalog_brand_id,
            available_stock=item.available_stock,
            is_active=item.is_active,
            picture_uri=item.picture_uri,
            average_rating=item.average_rating,
            review_count=item.review_count,
            brand=BrandResponse(**item.brand.model_dump()) if item.brand else None,
            type=TypeResponse(**item.type.model_dump()) if item.type else None,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class CatalogPageResponse(BaseModel):
    items: List[CatalogItemResponse]
    pagination: PaginationResponse


# --- Basket ---

class AddBasketItemRequest(BaseModel):
    catalog_item_id: str
    quantity: int = Field(default=1, ge=1, le=100)


class UpdateBasketItemRequest(BaseModel):
    quantity: int = Field(ge=1, le=100)


class TransferBasketRequest(BaseModel):
    session_id: str = Field(min_length=1, max_length=255)


class BasketItemResponse(BaseModel):
    id: str
    catalog_item_id: str
    quantity: int
    unit_price: Money
    line_total: Money
    product_name: Optional[str] = None
    picture_uri: Optional[str] = None
    current_price: Optional[Money] = None
    available_stock: Optional[int] = None


class BasketResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    last_modified: datetime
    items: List[BasketItemResponse]
    total_items: int
    total_price: Money

    @classmethod
    def from_domain(cls, view):
        basket, totals = view.basket, view.totals
        return cls(
            id=basket.id,
            user_id=basket.user_id,
            session_id=basket.session_id,
            last_modified=basket.last_modified,
            items=[
                BasketItemResponse(
                    id=line.id,
                    catalog_item_id=line.catalog_item_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.unit_price * line.quantity,
                    product_name=line.product_name,
                    picture_uri=line.picture_uri,
                    current_price=line.current_price,
                    available_stock=line.available_stock,
                )
                for line in basket.items
            ],
            total_items=totals.total_items,
            total_price=totals.total_price,
        )


# --- Orders ---

class ShippingAddressSchema(BaseModel):
    street: str = Field(min_length=5, max_length=200)
    city: str = Field(min_length=2, max_length=100)
    state: str = Field(min_length=2, max_length=100)
    country: str = Field(min_length=2, max_length=100)
    zip_code: str = Field(pattern=r"^[0-9]{5}(-[0-9]{4})?$")


class CreateOrderRequest(BaseModel):
    shipping_address: ShippingAddressSchema
    payment_method: PaymentMethod
    notes: Optional[str] = Field(default=None, max_length=500)


class UpdateOrderStatusRequest(BaseModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    tracking_number: Optional[str] = Field(default=None, min_length=5, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=500)


class OrderItemResponse(BaseModel):
    id: str
    catalog_item_id: str
    product_name: str
    product_description: Optional[str] = None
    unit_price: Money
    quantity: int
    line_total: Money
    picture_uri: Optional[str] = None


class OrderResponse(BaseModel):
    id: str
    user_id: str
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    subtotal: Money
    tax: Money
    shipping: Money
    total: Money
    shipping_address: ShippingAddressSchema
    notes: Optional[str] = None
    tracking_number: Optional[str] = None
    estimated_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    items: List[OrderItemResponse]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, order):
        return cls(
            id=order.id,
            user_id=order.user_id,
            status=order.status,
            payment_status=order.payment_status,
            payment_method=order.payment_method,
            subtotal=order.subtotal,
            tax=order.tax,
            shipping=order.shipping,
            total=order.total,
            shipping_address=ShippingAddressSchema.model_construct(**order.shipping_address.model_dump()),
            notes=order.notes,
            tracking_number=order.tracking_number,
            estimated_delivery_date=order.estimated_delivery_date,
            actual_delivery_date=order.actual_delivery_date,
            items=[
                OrderItemResponse(
                    id=item.id,
                    catalog_item_id=item.catalog_item_id,
                    product_name=item.product_name,
                    product_description=item.product_description,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    line_total=item.unit_price * item.quantity,
                    picture_uri=item.picture_uri,
                )
                for item in order.items
            ],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderPageResponse(BaseModel):
    orders: List[OrderResponse]
    pagination: PaginationResponse


class StatusStatisticsResponse(BaseModel):
    status: OrderStatus
    count: int
    revenue: Money


class OrderStatisticsResponse(BaseModel):
    total_orders: int
    total_revenue: Money
    orders_by_status: List[StatusStatisticsResponse]
    recent_orders: List[OrderResponse]

    @classmethod
    def from_domain(cls, stats: dict):
        return cls(
            total_orders=stats["total_orders"],
            total_revenue=stats["total_revenue"],
            orders_by_status=[StatusStatisticsResponse(**row) for row in stats["orders_by_status"]],
            recent_orders=[OrderResponse.from_domain(order) for order in stats["recent_orders"]],
        )


# --- Reviews ---

class CreateReviewRequest(BaseModel):
    catalog_item_id: str
    rating: int = Field(ge=1, le=5)
    title: str = Field(min_length=5, max_length=100)
    comment: str = Field(min_length=10, max_length=1000)


class UpdateReviewRequest(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    title: Optional[str] = Field(default=None, min_length=5, max_length=100)
    comment: Optional[str] = Field(default=None, min_length=10, max_length=1000)


class ReviewResponse(BaseModel):
    id: str
    user_id: str
    catalog_item_id: str
    rating: int
    title: str
    comment: str
    is_verified_purchase: bool
    helpful_count: int
    author_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, review):
        author = " ".join(
            part for part in (review.author_first_name, review.author_last_name) if part
        )
        return cls(
            id=review.id,
            user_id=review.user_id,
            catalog_item_id=review.catalog_item_id,
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            is_verified_purchase=review.is_verified_purchase,
            helpful_count=review.helpful_count,
            author_name=author or None,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )


class ProductReviewsResponse(BaseModel):
    reviews: List[ReviewResponse]
    pagination: PaginationResponse
    rating_distribution: dict[int, int]

    @classmethod
    def from_domain(cls, result):
        return cls(
            reviews=[ReviewResponse.from_domain(review) for review in result.reviews],
            pagination=PaginationResponse.from_domain(result.page),
            rating_distribution={rating: result.rating_distribution.get(rating, 0) for rating in range(5, 0, -1)},
        )


# --- Wishlist ---

class AddToWishlistRequest(BaseModel):
    catalog_item_id: str


class WishlistItemResponse(BaseModel):
    id: str
    catalog_item_id: str
    catalog_item: Optional[CatalogItemResponse] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, item):
        return cls(
            id=item.id,
            catalog_item_id=item.catalog_item_id,
            catalog_item=CatalogItemResponse.from_domain(item.catalog_item) if item.catalog_item else None,
            created_at=item.created_at,
        )


class WishlistPageResponse(BaseModel):
    items: List[WishlistItemResponse]
    pagination: PaginationResponse


class WishlistCheckResponse(BaseModel):
    in_wishlist: bool
    wishlist_item_id: Optional[str] = None
