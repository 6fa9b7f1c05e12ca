import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List, Tuple
from pydantic import BaseModel

from storefront.application.interfaces import CatalogFilter
from storefront.domain.models import CatalogItem, CatalogBrand, CatalogType
from storefront.domain.exceptions import (
    ItemNotFoundError, BrandOrTypeNotFoundError, CatalogEntryExistsError,
)

logger = logging.getLogger(__name__)


class CatalogItemDTO(BaseModel):
    name: str
    description: Optional[str] = None
    price: Decimal
    catalog_type_id: str
    catalog_brand_id: str
    available_stock: int = 0
    picture_uri: Optional[str] = None


class CatalogItemUpdateDTO(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    catalog_type_id: Optional[str] = None
    catalog_brand_id: Optional[str] = None
    available_stock: Optional[int] = None
    picture_uri: Optional[str] = None
    is_active: Optional[bool] = None


class ListCatalogItemsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, filters: CatalogFilter, page: int, limit: int) -> Tuple[List[CatalogItem], int]:
        async with self._uow() as uow:
            return await uow.catalog.list_active(filters, page, limit)


class GetCatalogItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, item_id: str) -> CatalogItem:
        async with self._uow() as uow:
            item = await uow.catalog.get_active(item_id)
            if not item:
                raise ItemNotFoundError(f"Товар {item_id} не найден")
            return item


class ListBrandsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> List[CatalogBrand]:
        async with self._uow() as uow:
            return await uow.catalog.list_brands()


class ListTypesUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> List[CatalogType]:
        async with self._uow() as uow:
            return await uow.catalog.list_types()


async def _check_references(uow, brand_id: Optional[str], type_id: Optional[str]) -> None:
    if brand_id and not await uow.catalog.get_brand(brand_id):
        raise BrandOrTypeNotFoundError(f"Бренд {brand_id} не найден")
    if type_id and not await uow.catalog.get_type(type_id):
        raise BrandOrTypeNotFoundError(f"Тип {type_id} не найден")


class CreateCatalogItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, dto: CatalogItemDTO) -> CatalogItem:
        async with self._uow() as uow:
            await _check_references(uow, dto.catalog_brand_id, dto.catalog_type_id)

            now = datetime.now(timezone.utc)
            item = CatalogItem(id=str(uuid.uuid4()), **dto.model_dump(), created_at=now, updated_at=now)
            await uow.catalog.create(item)
            await uow.commit()
            logger.info(f"Добавлен товар {item.id}: {item.name}")

            return await uow.catalog.get_by_id(item.id)


class UpdateCatalogItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, item_id: str, dto: CatalogItemUpdateDTO) -> CatalogItem:
        async with self._uow() as uow:
            if not await uow.catalog.get_by_id(item_id):
                raise ItemNotFoundError(f"Товар {item_id} не найден")
            await _check_references(uow, dto.catalog_brand_id, dto.catalog_type_id)

            values = dto.model_dump(exclude_unset=True, exclude_none=True)
            if values:
                await uow.catalog.update(item_id, **values)
                await uow.commit()
                logger.info(f"Товар {item_id} обновлен: {', '.join(values)}")

            return await uow.catalog.get_by_id(item_id)


class DeleteCatalogItemUseCase:
    """Мягкое удаление: позиции заказов продолжают ссылаться на товар"""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, item_id: str) -> None:
        async with self._uow() as uow:
            if not await uow.catalog.update(item_id, is_active=False):
                raise ItemNotFoundError(f"Товар {item_id} не найден")
            await uow.commit()
            logger.info(f"Товар {item_id} снят с продажи")


class CreateBrandUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, brand: str, description: Optional[str] = None,
                       logo_uri: Optional[str] = None) -> CatalogBrand:
        async with self._uow() as uow:
            if any(b.brand.lower() == brand.lower() for b in await uow.catalog.list_brands()):
                raise CatalogEntryExistsError(f"Бренд {brand}")
            entity = CatalogBrand(id=str(uuid.uuid4()), brand=brand, description=description, logo_uri=logo_uri)
            await uow.catalog.create_brand(entity)
            await uow.commit()
            return entity


class CreateTypeUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, type_name: str, description: Optional[str] = None) -> CatalogType:
        async with self._uow() as uow:
            if any(t.type.lower() == type_name.lower() for t in await uow.catalog.list_types()):
                raise CatalogEntryExistsError(f"Тип {type_name}")
            entity = CatalogType(id=str(uuid.uuid4()), type=type_name, description=description)
            await uow.catalog.create_type(entity)
            await uow.commit()
            return entity
