"""Shared cart routes"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from dressshop.app import ShopApp
from dressshop.models.cart import CartLine, CartSummary
from dressshop.utils.exceptions import NotFoundError

from .auth_deps import get_shop
from .models import AddToCartRequest, CartItemUpdateResponse, SuccessResponse, UpdateCartItemRequest

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("", response_model=CartSummary)
async def get_cart(shop: ShopApp = Depends(get_shop)):
    """Cart lines with current prices and totals"""
    return await run_in_threadpool(shop.cart.list)


@router.post("", response_model=CartLine, status_code=status.HTTP_201_CREATED)
async def add_to_cart(payload: AddToCartRequest, shop: ShopApp = Depends(get_shop)):
    try:
        return await run_in_threadpool(
            shop.cart.add, payload.product_id, payload.quantity, payload.color, payload.size
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/{line_id}", response_model=CartItemUpdateResponse)
async def update_cart_item(line_id: int, payload: UpdateCartItemRequest, shop: ShopApp = Depends(get_shop)):
    """Set a line's quantity; zero or less removes the line"""
    try:
        item = await run_in_threadpool(shop.cart.set_quantity, line_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CartItemUpdateResponse(success=True, item=item)


@router.delete("/{line_id}", response_model=SuccessResponse)
async def remove_cart_item(line_id: int, shop: ShopApp = Depends(get_shop)):
    if not await run_in_threadpool(shop.cart.remove, line_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found")
    return SuccessResponse(success=True)


@router.delete("", response_model=SuccessResponse)
async def clear_cart(shop: ShopApp = Depends(get_shop)):
    await run_in_threadpool(shop.cart.clear)
    return SuccessResponse(success=True)
