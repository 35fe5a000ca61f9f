"""Checkout and order lookup routes"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from dressshop.app import ShopApp
from dressshop.models.order import Order
from dressshop.utils.exceptions import EmptyCartError, NotFoundError

from .auth_deps import get_shop
from .models import CreateOrderRequest

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(payload: CreateOrderRequest, shop: ShopApp = Depends(get_shop)):
    """Place an order from the current cart and empty the cart"""
    try:
        return await run_in_threadpool(
            shop.orders.place_order,
            customer_name=payload.customer_name,
            phone_number=payload.phone_number,
            address=payload.address,
            payment_method=payload.payment_method,
        )
    except EmptyCartError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{order_number}", response_model=Order)
async def get_order(order_number: str, shop: ShopApp = Depends(get_shop)):
    try:
        return await run_in_threadpool(shop.orders.get_by_order_number, order_number)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
