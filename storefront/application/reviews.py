import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, List
from pydantic import BaseModel

from storefront.domain.models import Review, Principal, Page
from storefront.domain.exceptions import (
    ItemNotFoundError, ReviewNotFoundError, AlreadyReviewedError, PermissionDeniedError,
)

logger = logging.getLogger(__name__)


class CreateReviewDTO(BaseModel):
    catalog_item_id: str
    rating: int
    title: str
    comment: str


class UpdateReviewDTO(BaseModel):
    rating: Optional[int] = None
    title: Optional[str] = None
    comment: Optional[str] = None


class ProductReviews(BaseModel):
    reviews: List[Review]
    page: Page
    rating_distribution: dict


async def refresh_rating(uow, catalog_item_id: str) -> None:
    """Пересчет average_rating и review_count товара в текущей транзакции"""
    average, count = await uow.reviews.aggregate(catalog_item_id)
    await uow.catalog.update(catalog_item_id, average_rating=average, review_count=count)


class CreateReviewUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, dto: CreateReviewDTO) -> Review:
        async with self._uow() as uow:
            if not await uow.catalog.get_by_id(dto.catalog_item_id):
                raise ItemNotFoundError(f"Товар {dto.catalog_item_id} не найден")
            if await uow.reviews.get_by_user_and_item(user_id, dto.catalog_item_id):
                raise AlreadyReviewedError()

            now = datetime.now(timezone.utc)
            review = Review(
                id=str(uuid.uuid4()),
                user_id=user_id,
                catalog_item_id=dto.catalog_item_id,
                rating=dto.rating,
                title=dto.title,
                comment=dto.comment,
                # Подтвержденная покупка: есть доставленный заказ с этим товаром
                is_verified_purchase=await uow.orders.has_delivered_item(user_id, dto.catalog_item_id),
                created_at=now,
                updated_at=now,
            )
            await uow.reviews.create(review)
            await refresh_rating(uow, dto.catalog_item_id)
            await uow.commit()
            logger.info(f"Отзыв {review.id} на товар {dto.catalog_item_id}, оценка {dto.rating}")

            return await uow.reviews.get_by_id(review.id)


class ListProductReviewsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(
        self, catalog_item_id: str, sort_by: str, sort_order: str, page: int, limit: int
    ) -> ProductReviews:
        async with self._uow() as uow:
            reviews, total = await uow.reviews.list_for_item(catalog_item_id, sort_by, sort_order, page, limit)
            distribution = await uow.reviews.rating_distribution(catalog_item_id)
            return ProductReviews(
                reviews=reviews,
                page=Page(page=page, limit=limit, total=total),
                rating_distribution=distribution,
            )


class UpdateReviewUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, review_id: str, user_id: str, dto: UpdateReviewDTO) -> Review:
        async with self._uow() as uow:
            review = await uow.reviews.get_by_id(review_id)
            if not review:
                raise ReviewNotFoundError(f"Отзыв {review_id} не найден")
            if review.user_id != user_id:
                raise PermissionDeniedError("Изменять отзыв может только автор")

            values = dto.model_dump(exclude_none=True)
            if values:
                await uow.reviews.update(review_id, **values)
                await refresh_rating(uow, review.catalog_item_id)
                await uow.commit()

            return await uow.reviews.get_by_id(review_id)


class DeleteReviewUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, review_id: str, principal: Principal) -> None:
        async with self._uow() as uow:
            review = await uow.reviews.get_by_id(review_id)
            if not review:
                raise ReviewNotFoundError(f"Отзыв {review_id} не найден")
            if review.user_id != principal.user_id and not principal.is_admin:
                raise PermissionDeniedError("Удалять отзыв может только автор или администратор")

            await uow.reviews.delete(review_id)
            await refresh_rating(uow, review.catalog_item_id)
            await uow.commit()
            logger.info(f"Отзыв {review_id} удален пользователем {principal.user_id}")


class MarkReviewHelpfulUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, review_id: str) -> Review:
        async with self._uow() as uow:
            if not await uow.reviews.get_by_id(review_id):
                raise ReviewNotFoundError(f"Отзыв {review_id} не найден")
            await uow.reviews.increment_helpful(review_id)
            await uow.commit()
            return await uow.reviews.get_by_id(review_id)
