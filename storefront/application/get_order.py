from typing import Optional, List, Tuple

from storefront.application.interfaces import OrderFilter
from storefront.domain.models import Order, OrderStatus, Principal
from storefront.domain.exceptions import OrderNotFoundError, PermissionDeniedError


class GetOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str, principal: Principal) -> Order:
        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id)
            if not order:
                raise OrderNotFoundError(f"Заказ {order_id} не найден")
            if not principal.is_admin and not order.belongs_to(principal.user_id):
                raise PermissionDeniedError("Нет доступа к заказу")
            return order


class ListUserOrdersUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(
        self, user_id: str, status: Optional[OrderStatus], page: int, limit: int
    ) -> Tuple[List[Order], int]:
        async with self._uow() as uow:
            return await uow.orders.search(OrderFilter(user_id=user_id, status=status), page, limit)
