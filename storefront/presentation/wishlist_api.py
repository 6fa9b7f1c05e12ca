from fastapi import APIRouter, Depends, Query, status

from storefront.application.wishlist import (
    ListWishlistUseCase, AddToWishlistUseCase, RemoveFromWishlistUseCase,
    CheckWishlistUseCase, ClearWishlistUseCase,
)
from storefront.domain.models import Principal, Page
from storefront.presentation.dependencies import get_current_principal, provide
from storefront.presentation.schemas import (
    AddToWishlistRequest, WishlistItemResponse, WishlistPageResponse, WishlistCheckResponse,
    PaginationResponse, ErrorResponse,
)

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("", response_model=WishlistPageResponse)
async def get_wishlist(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=50),
    principal: Principal = Depends(get_current_principal),
    use_case: ListWishlistUseCase = Depends(provide(ListWishlistUseCase)),
):
    items, total = await use_case(principal.user_id, page, limit)
    return WishlistPageResponse(
        items=[WishlistItemResponse.from_domain(item) for item in items],
        pagination=PaginationResponse.from_domain(Page(page=page, limit=limit, total=total)),
    )


@router.post(
    "",
    response_model=WishlistItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_to_wishlist(
    request: AddToWishlistRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: AddToWishlistUseCase = Depends(provide(AddToWishlistUseCase)),
):
    item = await use_case(principal.user_id, request.catalog_item_id)
    return WishlistItemResponse.from_domain(item)


@router.get("/check/{catalog_item_id}", response_model=WishlistCheckResponse)
async def check_wishlist(
    catalog_item_id: str,
    principal: Principal = Depends(get_current_principal),
    use_case: CheckWishlistUseCase = Depends(provide(CheckWishlistUseCase)),
):
    item = await use_case(principal.user_id, catalog_item_id)
    return WishlistCheckResponse(in_wishlist=item is not None, wishlist_item_id=item.id if item else None)


@router.delete("/{wishlist_id}", status_code=status.HTTP_204_NO_CONTENT, responses={404: {"model": ErrorResponse}})
async def remove_from_wishlist(
    wishlist_id: str,
    principal: Principal = Depends(get_current_principal),
    use_case: RemoveFromWishlistUseCase = Depends(provide(RemoveFromWishlistUseCase)),
):
    await use_case(principal.user_id, wishlist_id)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_wishlist(
    principal: Principal = Depends(get_current_principal),
    use_case: ClearWishlistUseCase = Depends(provide(ClearWishlistUseCase)),
):
    await use_case(principal.user_id)
