"""Cart data models"""

from typing import List, Optional

from pydantic import Field

from .base import CamelModel
from .product import Product


class CartLine(CamelModel):
    """One line of the shared cart; unique per (product_id, color, size)"""
    id: int
    product_id: int
    quantity: int = Field(1, ge=1)
    color: Optional[str] = None
    size: Optional[str] = None


class CartLineWithProduct(CartLine):
    product: Product


class CartSummary(CamelModel):
    """Cart listing with totals computed at read time"""
    items: List[CartLineWithProduct] = Field(default_factory=list)
    subtotal: float = 0.0
    shipping: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    count: int = 0
