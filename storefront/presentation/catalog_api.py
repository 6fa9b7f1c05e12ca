from decimal import Decimal
from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, status

from storefront.application.catalog import (
    ListCatalogItemsUseCase, GetCatalogItemUseCase, ListBrandsUseCase, ListTypesUseCase,
    CreateCatalogItemUseCase, UpdateCatalogItemUseCase, DeleteCatalogItemUseCase,
    CreateBrandUseCase, CreateTypeUseCase, CatalogItemDTO, CatalogItemUpdateDTO,
)
from storefront.application.interfaces import CatalogFilter
from storefront.domain.models import Principal, Page
from storefront.presentation.dependencies import require_admin, provide
from storefront.presentation.schemas import (
    CatalogItemRequest, CatalogItemUpdateRequest, CatalogItemResponse, CatalogPageResponse,
    CreateBrandRequest, CreateTypeRequest, BrandResponse, TypeResponse,
    PaginationResponse, ErrorResponse,
)

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/items", response_model=CatalogPageResponse)
async def list_items(
    brand_id: Optional[str] = None,
    type_id: Optional[str] = None,
    min_price: Optional[Decimal] = Query(default=None, ge=0),
    max_price: Optional[Decimal] = Query(default=None, ge=0),
    search: Optional[str] = Query(default=None, max_length=100),
    sort_by: Literal["name", "price", "created_at", "average_rating"] = "name",
    sort_order: Literal["asc", "desc"] = "asc",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    use_case: ListCatalogItemsUseCase = Depends(provide(ListCatalogItemsUseCase)),
):
    filters = CatalogFilter(
        brand_id=brand_id,
        type_id=type_id,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    items, total = await use_case(filters, page, limit)
    return CatalogPageResponse(
        items=[CatalogItemResponse.from_domain(item) for item in items],
        pagination=PaginationResponse.from_domain(Page(page=page, limit=limit, total=total)),
    )


@router.get("/items/{item_id}", response_model=CatalogItemResponse, responses={404: {"model": ErrorResponse}})
async def get_item(
    item_id: str,
    use_case: GetCatalogItemUseCase = Depends(provide(GetCatalogItemUseCase)),
):
    return CatalogItemResponse.from_domain(await use_case(item_id))


@router.get("/brands", response_model=list[BrandResponse])
async def list_brands(use_case: ListBrandsUseCase = Depends(provide(ListBrandsUseCase))):
    return [BrandResponse(**brand.model_dump()) for brand in await use_case()]


@router.get("/types", response_model=list[TypeResponse])
async def list_types(use_case: ListTypesUseCase = Depends(provide(ListTypesUseCase))):
    return [TypeResponse(**catalog_type.model_dump()) for catalog_type in await use_case()]


@router.post("/items", response_model=CatalogItemResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    request: CatalogItemRequest,
    _: Principal = Depends(require_admin),
    use_case: CreateCatalogItemUseCase = Depends(provide(CreateCatalogItemUseCase)),
):
    """Добавить товар (админ)"""
    item = await use_case(CatalogItemDTO(**request.model_dump()))
    return CatalogItemResponse.from_domain(item)


@router.put("/items/{item_id}", response_model=CatalogItemResponse, responses={404: {"model": ErrorResponse}})
async def update_item(
    item_id: str,
    request: CatalogItemUpdateRequest,
    _: Principal = Depends(require_admin),
    use_case: UpdateCatalogItemUseCase = Depends(provide(UpdateCatalogItemUseCase)),
):
    item = await use_case(item_id, CatalogItemUpdateDTO(**request.model_dump(exclude_unset=True)))
    return CatalogItemResponse.from_domain(item)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, responses={404: {"model": ErrorResponse}})
async def delete_item(
    item_id: str,
    _: Principal = Depends(require_admin),
    use_case: DeleteCatalogItemUseCase = Depends(provide(DeleteCatalogItemUseCase)),
):
    """Снять товар с продажи (is_active = false)"""
    await use_case(item_id)


@router.post("/brands", response_model=BrandResponse, status_code=status.HTTP_201_CREATED)
async def create_brand(
    request: CreateBrandRequest,
    _: Principal = Depends(require_admin),
    use_case: CreateBrandUseCase = Depends(provide(CreateBrandUseCase)),
):
    brand = await use_case(request.brand, request.description, request.logo_uri)
    return BrandResponse(**brand.model_dump())


@router.post("/types", response_model=TypeResponse, status_code=status.HTTP_201_CREATED)
async def create_type(
    request: CreateTypeRequest,
    _: Principal = Depends(require_admin),
    use_case: CreateTypeUseCase = Depends(provide(CreateTypeUseCase)),
):
    catalog_type = await use_case(request.type, request.description)
    return TypeResponse(**catalog_type.model_dump())
