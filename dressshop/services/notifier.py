"""
Order notifications over WhatsApp.

Delivery is not wired to a messaging provider: the notifier composes the
message and the wa.me link and logs them.
"""

import re
from typing import Protocol
from urllib.parse import quote

from ..models.order import Order
from ..utils.logger import get_logger

logger = get_logger(__name__)

SHOP_NAME = "Chic Boutique"


class OrderNotifier(Protocol):
    def send_order(self, phone_number: str, order: Order) -> bool:
        ...


def format_currency(amount) -> str:
    return f"${amount:,.2f}"


def build_order_message(order: Order, shop_name: str = SHOP_NAME) -> str:
    items = "\n".join(
        f"{item.quantity}x {item.title} ({item.size}, {item.color}) - {format_currency(item.price)}"
        for item in order.items
    )
    return (
        f"*Order #{order.order_number}*\n\n"
        f"*Items:*\n{items}\n\n"
        f"*Subtotal:* {format_currency(order.subtotal)}\n"
        f"*Shipping:* {format_currency(order.shipping)}\n"
        f"*Tax:* {format_currency(order.tax)}\n"
        f"*Total:* {format_currency(order.total)}\n\n"
        f"*Shipping Address:*\n{order.address}\n\n"
        f"*Payment Method:* {order.payment_method.value}\n\n"
        f"Thank you for shopping with {shop_name}!"
    )


def whatsapp_url(phone_number: str, message: str) -> str:
    digits = re.sub(r"\D", "", phone_number)
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"


class WhatsAppNotifier:
    """Logs the WhatsApp message that would be sent for an order"""

    def __init__(self, shop_name: str = SHOP_NAME):
        self.shop_name = shop_name

    def send_order(self, phone_number: str, order: Order) -> bool:
        message = build_order_message(order, self.shop_name)
        logger.info(
            "Sending WhatsApp message",
            phone_number=phone_number,
            order_number=order.order_number,
            url=whatsapp_url(phone_number, message),
        )
        return True
