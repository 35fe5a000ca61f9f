"""Data models"""

from .cart import CartLine, CartLineWithProduct, CartSummary
from .order import Order, OrderItem, PaymentMethod
from .product import Product, ProductData
from .session import Session
from .user import Identity, PublicIdentity

__all__ = [
    "CartLine",
    "CartLineWithProduct",
    "CartSummary",
    "Identity",
    "Order",
    "OrderItem",
    "PaymentMethod",
    "Product",
    "ProductData",
    "PublicIdentity",
    "Session",
]
