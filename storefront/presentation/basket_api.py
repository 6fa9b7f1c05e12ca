from fastapi import APIRouter, Depends

from storefront.application.basket import (
    BasketOwner, AddBasketItemDTO, GetBasketUseCase, AddBasketItemUseCase,
    UpdateBasketItemUseCase, RemoveBasketItemUseCase, ClearBasketUseCase, TransferBasketUseCase,
)
from storefront.domain.models import Principal
from storefront.presentation.dependencies import get_basket_owner, get_current_principal, provide
from storefront.presentation.schemas import (
    AddBasketItemRequest, UpdateBasketItemRequest, TransferBasketRequest, BasketResponse, ErrorResponse,
)

router = APIRouter(prefix="/basket", tags=["basket"])


@router.get("", response_model=BasketResponse, responses={400: {"model": ErrorResponse}})
async def get_basket(
    owner: BasketOwner = Depends(get_basket_owner),
    use_case: GetBasketUseCase = Depends(provide(GetBasketUseCase)),
):
    """Текущая корзина пользователя или сессии X-Session-ID"""
    return BasketResponse.from_domain(await use_case(owner))


@router.post(
    "/items",
    response_model=BasketResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def add_item(
    request: AddBasketItemRequest,
    owner: BasketOwner = Depends(get_basket_owner),
    use_case: AddBasketItemUseCase = Depends(provide(AddBasketItemUseCase)),
):
    dto = AddBasketItemDTO(catalog_item_id=request.catalog_item_id, quantity=request.quantity)
    return BasketResponse.from_domain(await use_case(owner, dto))


@router.put(
    "/items/{item_id}",
    response_model=BasketResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_item(
    item_id: str,
    request: UpdateBasketItemRequest,
    owner: BasketOwner = Depends(get_basket_owner),
    use_case: UpdateBasketItemUseCase = Depends(provide(UpdateBasketItemUseCase)),
):
    return BasketResponse.from_domain(await use_case(owner, item_id, request.quantity))


@router.delete("/items/{item_id}", response_model=BasketResponse, responses={404: {"model": ErrorResponse}})
async def remove_item(
    item_id: str,
    owner: BasketOwner = Depends(get_basket_owner),
    use_case: RemoveBasketItemUseCase = Depends(provide(RemoveBasketItemUseCase)),
):
    return BasketResponse.from_domain(await use_case(owner, item_id))


@router.delete("", response_model=BasketResponse)
async def clear_basket(
    owner: BasketOwner = Depends(get_basket_owner),
    use_case: ClearBasketUseCase = Depends(provide(ClearBasketUseCase)),
):
    return BasketResponse.from_domain(await use_case(owner))


@router.post("/transfer", response_model=BasketResponse, responses={401: {"model": ErrorResponse}})
async def transfer_basket(
    request: TransferBasketRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: TransferBasketUseCase = Depends(provide(TransferBasketUseCase)),
):
    """Перенос анонимной корзины после входа"""
    return BasketResponse.from_domain(await use_case(principal.user_id, request.session_id))
