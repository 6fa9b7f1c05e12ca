import logging
import uuid
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel

from storefront.domain.models import Basket, BasketItem
from storefront.domain.pricing import BasketTotals, summarize_basket
from storefront.domain.exceptions import (
    BasketOwnerRequiredError, BasketItemNotFoundError, ItemNotFoundError, InsufficientStockError,
)

logger = logging.getLogger(__name__)


class BasketOwner(BaseModel):
    """Владелец корзины: пользователь из токена либо анонимная сессия"""
    user_id: Optional[str] = None
    session_id: Optional[str] = None

    def require(self) -> "BasketOwner":
        if not self.user_id and not self.session_id:
            raise BasketOwnerRequiredError()
        # Авторизованный пользователь всегда работает со своей корзиной
        if self.user_id:
            return BasketOwner(user_id=self.user_id)
        return self


class BasketView(BaseModel):
    basket: Basket
    totals: BasketTotals

    @classmethod
    def of(cls, basket: Basket) -> "BasketView":
        return cls(basket=basket, totals=summarize_basket(basket.items))


class AddBasketItemDTO(BaseModel):
    catalog_item_id: str
    quantity: int = 1


async def get_or_create_basket(uow, owner: BasketOwner) -> Basket:
    """Активная корзина владельца; новая создается лениво"""
    basket = await uow.baskets.get_active(user_id=owner.user_id, session_id=owner.session_id)
    if basket:
        return basket

    basket = Basket(
        id=str(uuid.uuid4()),
        user_id=owner.user_id,
        session_id=None if owner.user_id else owner.session_id,
        is_active=True,
        last_modified=datetime.now(timezone.utc),
        items=[],
    )
    await uow.baskets.create(basket)
    logger.info(f"Создана корзина {basket.id}")
    return basket


async def _reload(uow, owner: BasketOwner) -> BasketView:
    basket = await uow.baskets.get_active(user_id=owner.user_id, session_id=owner.session_id)
    return BasketView.of(basket)


class GetBasketUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, owner: BasketOwner) -> BasketView:
        owner = owner.require()
        async with self._uow() as uow:
            basket = await get_or_create_basket(uow, owner)
            await uow.commit()
            return BasketView.of(basket)


class AddBasketItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, owner: BasketOwner, dto: AddBasketItemDTO) -> BasketView:
        owner = owner.require()
        async with self._uow() as uow:
            item = await uow.catalog.get_active(dto.catalog_item_id)
            if not item:
                raise ItemNotFoundError(f"Товар {dto.catalog_item_id} не найден")

            basket = await get_or_create_basket(uow, owner)
            line = basket.find_line(item.id)
            new_quantity = dto.quantity + (line.quantity if line else 0)
            if not item.has_stock_for(new_quantity):
                raise InsufficientStockError(item.name, item.available_stock, new_quantity)

            # Цена фиксируется по текущей цене каталога
            if line:
                await uow.baskets.update_item(line.id, new_quantity, item.price)
            else:
                await uow.baskets.add_item(BasketItem(
                    id=str(uuid.uuid4()),
                    basket_id=basket.id,
                    catalog_item_id=item.id,
                    quantity=dto.quantity,
                    unit_price=item.price,
                ))
            await uow.baskets.touch(basket.id)
            await uow.commit()
            logger.info(f"В корзину {basket.id} добавлен товар {item.id} x{dto.quantity}")

            return await _reload(uow, owner)


class UpdateBasketItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, owner: BasketOwner, basket_item_id: str, quantity: int) -> BasketView:
        owner = owner.require()
        async with self._uow() as uow:
            basket = await get_or_create_basket(uow, owner)
            line = next((line for line in basket.items if line.id == basket_item_id), None)
            if not line:
                raise BasketItemNotFoundError("Позиция корзины не найдена")

            item = await uow.catalog.get_by_id(line.catalog_item_id)
            if not item.has_stock_for(quantity):
                raise InsufficientStockError(item.name, item.available_stock, quantity)

            await uow.baskets.update_item(line.id, quantity, item.price)
            await uow.baskets.touch(basket.id)
            await uow.commit()

            return await _reload(uow, owner)


class RemoveBasketItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, owner: BasketOwner, basket_item_id: str) -> BasketView:
        owner = owner.require()
        async with self._uow() as uow:
            basket = await get_or_create_basket(uow, owner)
            if not any(line.id == basket_item_id for line in basket.items):
                raise BasketItemNotFoundError("Позиция корзины не найдена")

            await uow.baskets.delete_item(basket_item_id)
            await uow.baskets.touch(basket.id)
            await uow.commit()

            return await _reload(uow, owner)


class ClearBasketUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, owner: BasketOwner) -> BasketView:
        owner = owner.require()
        async with self._uow() as uow:
            basket = await get_or_create_basket(uow, owner)
            await uow.baskets.clear(basket.id)
            await uow.baskets.touch(basket.id)
            await uow.commit()

            return await _reload(uow, owner)


class TransferBasketUseCase:
    """Перенос анонимной корзины в корзину пользователя после входа"""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, session_id: str) -> BasketView:
        owner = BasketOwner(user_id=user_id)
        async with self._uow() as uow:
            anonymous = await uow.baskets.get_active(session_id=session_id)
            user_basket = await get_or_create_basket(uow, owner)

            if anonymous and not anonymous.is_empty():
                # Остатки здесь не проверяются, проверка будет при оформлении заказа
                for line in anonymous.items:
                    existing = user_basket.find_line(line.catalog_item_id)
                    if existing:
                        await uow.baskets.update_item(
                            existing.id, existing.quantity + line.quantity, line.unit_price
                        )
                    else:
                        await uow.baskets.add_item(BasketItem(
                            id=str(uuid.uuid4()),
                            basket_id=user_basket.id,
                            catalog_item_id=line.catalog_item_id,
                            quantity=line.quantity,
                            unit_price=line.unit_price,
                        ))
                await uow.baskets.deactivate(anonymous.id)
                await uow.baskets.touch(user_basket.id)
                logger.info(
                    f"Корзина сессии {session_id} перенесена пользователю {user_id} "
                    f"({len(anonymous.items)} позиций)"
                )
            else:
                logger.info(f"Нет товаров для переноса из сессии {session_id}")

            await uow.commit()
            return await _reload(uow, owner)
