import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, List, Tuple
from pydantic import BaseModel

from storefront.application.cancel_order import restore_stock
from storefront.application.interfaces import OrderFilter
from storefront.domain.models import Order, OrderStatus, PaymentStatus
from storefront.domain.exceptions import OrderNotFoundError, InvalidStatusTransitionError

logger = logging.getLogger(__name__)

ESTIMATED_DELIVERY_DAYS = 7


class UpdateOrderStatusDTO(BaseModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    tracking_number: Optional[str] = None
    notes: Optional[str] = None


class ListOrdersUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, filters: OrderFilter, page: int, limit: int) -> Tuple[List[Order], int]:
        async with self._uow() as uow:
            return await uow.orders.search(filters, page, limit)


class UpdateOrderStatusUseCase:
    """Изменение статуса заказа администратором"""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str, dto: UpdateOrderStatusDTO) -> Order:
        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id)
            if not order:
                raise OrderNotFoundError(f"Заказ {order_id} не найден")

            values = {}
            if dto.payment_status:
                values["payment_status"] = dto.payment_status
            if dto.tracking_number:
                values["tracking_number"] = dto.tracking_number
            if dto.notes:
                values["notes"] = dto.notes

            if dto.status and dto.status != order.status:
                if not order.can_transition_to(dto.status):
                    raise InvalidStatusTransitionError(order.status, dto.status)
                values["status"] = dto.status

                now = datetime.now(timezone.utc)
                if dto.status == OrderStatus.SHIPPED and not order.estimated_delivery_date:
                    values["estimated_delivery_date"] = now + timedelta(days=ESTIMATED_DELIVERY_DAYS)
                if dto.status == OrderStatus.DELIVERED:
                    values["actual_delivery_date"] = now
                if dto.status == OrderStatus.CANCELLED:
                    values.setdefault("payment_status", PaymentStatus.REFUNDED)

                # Статус мог измениться после чтения (например, отмена владельцем)
                if not await uow.orders.update_if_status(order.id, order.status, **values):
                    current = await uow.orders.get_by_id(order.id)
                    logger.warning(f"Статус заказа {order.id} изменился во время обновления")
                    raise InvalidStatusTransitionError(current.status, dto.status)
                if dto.status == OrderStatus.CANCELLED:
                    # Отмена администратором тоже возвращает товар на склад
                    await restore_stock(uow, order)
                await uow.commit()
                logger.info(f"Заказ {order.id} обновлен: {', '.join(values)}")
            elif values:
                await uow.orders.update(order.id, **values)
                await uow.commit()
                logger.info(f"Заказ {order.id} обновлен: {', '.join(values)}")

            return await uow.orders.get_by_id(order.id)


class OrderStatisticsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, start_date: Optional[datetime], end_date: Optional[datetime]) -> dict:
        async with self._uow() as uow:
            return await uow.orders.statistics(start_date, end_date)
