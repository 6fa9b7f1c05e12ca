import logging
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel
import uuid

from storefront.domain.models import (
    Order, OrderItem, OrderStatus, PaymentStatus, PaymentMethod, ShippingAddress,
)
from storefront.domain.pricing import calculate_order_totals
from storefront.domain.exceptions import (
    EmptyBasketError, InsufficientStockError, ProductUnavailableError,
)


logger = logging.getLogger(__name__)


class CreateOrderDTO(BaseModel):
    user_id: str
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    notes: Optional[str] = None


class CreateOrderUseCase:
    """Оформление заказа из активной корзины пользователя.

    Все шаги выполняются в одной транзакции: заказ, позиции заказа,
    списание остатков, очистка и деактивация корзины. Любая ошибка до
    commit откатывает все изменения.
    """

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_data: CreateOrderDTO) -> Order:
        logger.info(f"Создание заказа для пользователя {order_data.user_id}")

        async with self._uow() as uow:
            # 1. Корзина
            basket = await uow.baskets.get_active(user_id=order_data.user_id)
            if not basket or basket.is_empty():
                logger.info(f"Корзина пользователя {order_data.user_id} пуста")
                raise EmptyBasketError()

            # 2. Проверка остатков по заблокированным строкам каталога
            products = await uow.catalog.get_many_for_update(
                [line.catalog_item_id for line in basket.items]
            )
            for line in basket.items:
                product = products.get(line.catalog_item_id)
                if not product or not product.is_active:
                    raise ProductUnavailableError(line.product_name or line.catalog_item_id)
                if not product.has_stock_for(line.quantity):
                    logger.warning(
                        f"Недостаточно товара {product.id}: доступно {product.available_stock}, "
                        f"требуется {line.quantity}"
                    )
                    raise InsufficientStockError(product.name, product.available_stock, line.quantity)

            # 3. Расчет суммы
            totals = calculate_order_totals(
                sum(line.unit_price * line.quantity for line in basket.items)
            )

            # 4. Создание заказа со снимком товаров
            now = datetime.now(timezone.utc)
            order_id = str(uuid.uuid4())
            order = Order(
                id=order_id,
                user_id=order_data.user_id,
                status=OrderStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                payment_method=order_data.payment_method,
                subtotal=totals.subtotal,
                tax=totals.tax,
                shipping=totals.shipping,
                total=totals.total,
                shipping_address=order_data.shipping_address,
                notes=order_data.notes,
                items=[
                    OrderItem(
                        id=str(uuid.uuid4()),
                        order_id=order_id,
                        catalog_item_id=line.catalog_item_id,
                        product_name=products[line.catalog_item_id].name,
                        product_description=products[line.catalog_item_id].description,
                        unit_price=line.unit_price,
                        quantity=line.quantity,
                        picture_uri=products[line.catalog_item_id].picture_uri,
                    )
                    for line in basket.items
                ],
                created_at=now,
                updated_at=now,
            )
            await uow.orders.create(order)

            # 5. Списание остатков
            for line in basket.items:
                if not await uow.catalog.decrement_stock(line.catalog_item_id, line.quantity):
                    product = await uow.catalog.get_by_id(line.catalog_item_id)
                    logger.warning(f"Остаток товара {product.id} изменился во время оформления заказа")
                    raise InsufficientStockError(product.name, product.available_stock, line.quantity)

            # 6. Очистка корзины
            await uow.baskets.clear(basket.id)
            await uow.baskets.deactivate(basket.id)

            await uow.commit()
            logger.info(f"Заказ создан: {order.id}, сумма {order.total}")

            return await uow.orders.get_by_id(order.id)
