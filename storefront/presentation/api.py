from fastapi import APIRouter

from storefront.presentation import (
    auth_api, basket_api, catalog_api, orders_api, reviews_api, wishlist_api,
)

router = APIRouter()

router.include_router(auth_api.router)
router.include_router(catalog_api.router)
router.include_router(basket_api.router)
router.include_router(orders_api.router)
router.include_router(reviews_api.router)
router.include_router(wishlist_api.router)
