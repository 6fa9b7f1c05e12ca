from typing import Literal
from fastapi import APIRouter, Depends, Query, status

from storefront.application.reviews import (
    CreateReviewUseCase, ListProductReviewsUseCase, UpdateReviewUseCase, DeleteReviewUseCase,
    MarkReviewHelpfulUseCase, CreateReviewDTO, UpdateReviewDTO,
)
from storefront.domain.models import Principal
from storefront.presentation.dependencies import get_current_principal, provide
from storefront.presentation.schemas import (
    CreateReviewRequest, UpdateReviewRequest, ReviewResponse, ProductReviewsResponse, ErrorResponse,
)

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.get("/products/{catalog_item_id}", response_model=ProductReviewsResponse)
async def product_reviews(
    catalog_item_id: str,
    sort_by: Literal["created_at", "rating", "helpful_count"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    use_case: ListProductReviewsUseCase = Depends(provide(ListProductReviewsUseCase)),
):
    """Отзывы о товаре и распределение оценок"""
    result = await use_case(catalog_item_id, sort_by, sort_order, page, limit)
    return ProductReviewsResponse.from_domain(result)


@router.post(
    "",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_review(
    request: CreateReviewRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: CreateReviewUseCase = Depends(provide(CreateReviewUseCase)),
):
    review = await use_case(principal.user_id, CreateReviewDTO(**request.model_dump()))
    return ReviewResponse.from_domain(review)


@router.put(
    "/{review_id}",
    response_model=ReviewResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_review(
    review_id: str,
    request: UpdateReviewRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: UpdateReviewUseCase = Depends(provide(UpdateReviewUseCase)),
):
    review = await use_case(review_id, principal.user_id, UpdateReviewDTO(**request.model_dump()))
    return ReviewResponse.from_domain(review)


@router.delete(
    "/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_review(
    review_id: str,
    principal: Principal = Depends(get_current_principal),
    use_case: DeleteReviewUseCase = Depends(provide(DeleteReviewUseCase)),
):
    await use_case(review_id, principal)


@router.post("/{review_id}/helpful", response_model=ReviewResponse, responses={404: {"model": ErrorResponse}})
async def mark_helpful(
    review_id: str,
    use_case: MarkReviewHelpfulUseCase = Depends(provide(MarkReviewHelpfulUseCase)),
):
    return ReviewResponse.from_domain(await use_case(review_id))
