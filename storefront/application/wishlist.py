import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List, Tuple

from storefront.domain.models import WishlistItem
from storefront.domain.exceptions import (
    ItemNotFoundError, WishlistItemNotFoundError, AlreadyInWishlistError,
)

logger = logging.getLogger(__name__)


class ListWishlistUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, page: int, limit: int) -> Tuple[List[WishlistItem], int]:
        async with self._uow() as uow:
            return await uow.wishlist.list_for_user(user_id, page, limit)


class AddToWishlistUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, catalog_item_id: str) -> WishlistItem:
        async with self._uow() as uow:
            product = await uow.catalog.get_active(catalog_item_id)
            if not product:
                raise ItemNotFoundError(f"Товар {catalog_item_id} не найден")
            if await uow.wishlist.get_by_user_and_item(user_id, catalog_item_id):
                raise AlreadyInWishlistError()

            item = WishlistItem(
                id=str(uuid.uuid4()),
                user_id=user_id,
                catalog_item_id=catalog_item_id,
                created_at=datetime.now(timezone.utc),
            )
            await uow.wishlist.create(item)
            await uow.commit()
            return item.model_copy(update={"catalog_item": product})


class RemoveFromWishlistUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, wishlist_id: str) -> None:
        async with self._uow() as uow:
            item = await uow.wishlist.get_by_id(wishlist_id)
            # Чужая запись неотличима от отсутствующей
            if not item or item.user_id != user_id:
                raise WishlistItemNotFoundError("Запись избранного не найдена")
            await uow.wishlist.delete(wishlist_id)
            await uow.commit()


class CheckWishlistUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, catalog_item_id: str) -> Optional[WishlistItem]:
        async with self._uow() as uow:
            return await uow.wishlist.get_by_user_and_item(user_id, catalog_item_id)


class ClearWishlistUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str) -> None:
        async with self._uow() as uow:
            await uow.wishlist.clear(user_id)
            await uow.commit()
            logger.info(f"Избранное пользователя {user_id} очищено")
