"""Catalog product models"""

from decimal import Decimal
from typing import List, Optional

from pydantic import ConfigDict, Field

from .base import CamelModel


class ProductData(CamelModel):
    """Product fields as submitted by the admin CMS"""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    images: List[str] = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    rating: Optional[Decimal] = Field(Decimal("4.5"), ge=0, le=5, max_digits=3, decimal_places=1)
    colors: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)


class Product(ProductData):
    """Stored catalog product"""

    model_config = ConfigDict(extra="ignore")

    id: int
