"""Catalog routes: public reads, admin-only writes"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from dressshop.app import ShopApp
from dressshop.models.product import Product, ProductData
from dressshop.models.user import Identity
from dressshop.utils.exceptions import NotFoundError

from .auth_deps import get_shop, require_admin
from .models import SuccessResponse

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[Product])
async def list_products(shop: ShopApp = Depends(get_shop)):
    return await run_in_threadpool(shop.catalog.list_products)


@router.get("/category/{category}", response_model=List[Product])
async def list_products_by_category(category: str, shop: ShopApp = Depends(get_shop)):
    return await run_in_threadpool(shop.catalog.list_by_category, category)


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: int, shop: ShopApp = Depends(get_shop)):
    try:
        return await run_in_threadpool(shop.catalog.get, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductData,
    shop: ShopApp = Depends(get_shop),
    admin: Identity = Depends(require_admin),
):
    return await run_in_threadpool(shop.catalog.create, payload)


@router.patch("/{product_id}", response_model=Product)
async def update_product(
    product_id: int,
    payload: ProductData,
    shop: ShopApp = Depends(get_shop),
    admin: Identity = Depends(require_admin),
):
    try:
        return await run_in_threadpool(shop.catalog.update, product_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{product_id}", response_model=SuccessResponse)
async def delete_product(
    product_id: int,
    shop: ShopApp = Depends(get_shop),
    admin: Identity = Depends(require_admin),
):
    try:
        await run_in_threadpool(shop.catalog.delete, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return SuccessResponse(success=True)
