from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from storefront.application.cancel_order import CancelOrderUseCase
from storefront.application.create_order import CreateOrderUseCase, CreateOrderDTO
from storefront.application.get_order import GetOrderUseCase, ListUserOrdersUseCase
from storefront.application.interfaces import OrderFilter
from storefront.application.manage_orders import (
    ListOrdersUseCase, UpdateOrderStatusUseCase, UpdateOrderStatusDTO, OrderStatisticsUseCase,
)
from storefront.domain.models import OrderStatus, PaymentStatus, Principal, ShippingAddress, Page
from storefront.presentation.dependencies import get_current_principal, require_admin, provide
from storefront.presentation.schemas import (
    CreateOrderRequest, UpdateOrderStatusRequest, OrderResponse, OrderPageResponse,
    OrderStatisticsResponse, PaginationResponse, ErrorResponse,
)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "",
    response_model=OrderResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    request: CreateOrderRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: CreateOrderUseCase = Depends(provide(CreateOrderUseCase)),
):
    """Оформить заказ из текущей корзины"""
    dto = CreateOrderDTO(
        user_id=principal.user_id,
        shipping_address=ShippingAddress(**request.shipping_address.model_dump()),
        payment_method=request.payment_method,
        notes=request.notes,
    )
    order = await use_case(dto)
    return OrderResponse.from_domain(order)


@router.get("/my-orders", response_model=OrderPageResponse)
async def my_orders(
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    principal: Principal = Depends(get_current_principal),
    use_case: ListUserOrdersUseCase = Depends(provide(ListUserOrdersUseCase)),
):
    """Заказы текущего пользователя, новые первыми"""
    orders, total = await use_case(principal.user_id, status_filter, page, limit)
    return OrderPageResponse(
        orders=[OrderResponse.from_domain(order) for order in orders],
        pagination=PaginationResponse.from_domain(Page(page=page, limit=limit, total=total)),
    )


@router.get("", response_model=OrderPageResponse)
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    payment_status: Optional[PaymentStatus] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    search: Optional[str] = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    _: Principal = Depends(require_admin),
    use_case: ListOrdersUseCase = Depends(provide(ListOrdersUseCase)),
):
    """Все заказы (админ)"""
    filters = OrderFilter(
        status=status_filter,
        payment_status=payment_status,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    orders, total = await use_case(filters, page, limit)
    return OrderPageResponse(
        orders=[OrderResponse.from_domain(order) for order in orders],
        pagination=PaginationResponse.from_domain(Page(page=page, limit=limit, total=total)),
    )


@router.get("/admin/statistics", response_model=OrderStatisticsResponse)
async def order_statistics(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    _: Principal = Depends(require_admin),
    use_case: OrderStatisticsUseCase = Depends(provide(OrderStatisticsUseCase)),
):
    stats = await use_case(start_date, end_date)
    return OrderStatisticsResponse.from_domain(stats)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_order(
    order_id: str,
    principal: Principal = Depends(get_current_principal),
    use_case: GetOrderUseCase = Depends(provide(GetOrderUseCase)),
):
    """Получить заказ по ID"""
    order = await use_case(order_id, principal)
    return OrderResponse.from_domain(order)


@router.put(
    "/{order_id}/cancel",
    response_model=OrderResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def cancel_order(
    order_id: str,
    principal: Principal = Depends(get_current_principal),
    use_case: CancelOrderUseCase = Depends(provide(CancelOrderUseCase)),
):
    """Отменить заказ (только pending)"""
    order = await use_case(order_id, principal)
    return OrderResponse.from_domain(order)


@router.put(
    "/{order_id}/status",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    _: Principal = Depends(require_admin),
    use_case: UpdateOrderStatusUseCase = Depends(provide(UpdateOrderStatusUseCase)),
):
    """Изменить статус заказа (админ)"""
    order = await use_case(order_id, UpdateOrderStatusDTO(**request.model_dump()))
    return OrderResponse.from_domain(order)
