import logging

from storefront.domain.models import Order, OrderStatus, PaymentStatus, Principal
from storefront.domain.exceptions import (
    OrderNotFoundError, OrderNotCancellableError, PermissionDeniedError,
)

logger = logging.getLogger(__name__)


async def restore_stock(uow, order: Order) -> None:
    """Возврат количества позиций заказа на склад"""
    for item in order.items:
        await uow.catalog.increment_stock(item.catalog_item_id, item.quantity)


class CancelOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str, principal: Principal) -> Order:
        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id)
            if not order:
                raise OrderNotFoundError(f"Заказ {order_id} не найден")
            if not order.belongs_to(principal.user_id):
                raise PermissionDeniedError("Нет доступа к заказу")
            if not order.can_be_cancelled():
                raise OrderNotCancellableError(order.status)

            # Повторная отмена, начатая параллельно, не пройдет условие на статус
            cancelled = await uow.orders.update_if_status(
                order.id, OrderStatus.PENDING,
                status=OrderStatus.CANCELLED, payment_status=PaymentStatus.REFUNDED,
            )
            if not cancelled:
                raise OrderNotCancellableError(OrderStatus.CANCELLED)
            await restore_stock(uow, order)

            await uow.commit()
            logger.info(f"Заказ {order.id} отменен пользователем {principal.user_id}")

            return await uow.orders.get_by_id(order.id)
