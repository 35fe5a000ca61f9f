"""Order data models"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import ConfigDict, Field

from .base import CamelModel, utcnow


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH_ON_DELIVERY = "cashOnDelivery"
    BANK_TRANSFER = "bankTransfer"
    WHATSAPP = "whatsapp"


class OrderItem(CamelModel):
    """Line item frozen at order time"""

    model_config = ConfigDict(frozen=True)

    product_id: int
    title: str
    price: Decimal
    quantity: int = Field(..., ge=1)
    color: Optional[str] = None
    size: Optional[str] = None
    image: Optional[str] = None


class Order(CamelModel):
    """Immutable point-in-time order snapshot"""

    model_config = ConfigDict(frozen=True)

    id: int
    customer_name: str
    phone_number: str
    address: str
    payment_method: PaymentMethod
    items: List[OrderItem]
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    order_number: str
    created_at: datetime = Field(default_factory=utcnow)
