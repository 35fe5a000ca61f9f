"""
Checkout: turns the current cart into an immutable order.

Reading the cart, freezing items and totals, writing the order and
clearing the cart happen in one repository transaction, so a failure at
any step leaves the cart untouched and no order behind. The WhatsApp
notification runs after commit and cannot fail the checkout.
"""

import secrets
import string
from typing import Optional

from ..models.base import utcnow
from ..models.order import Order, OrderItem, PaymentMethod
from ..storage.base import Repository
from ..utils.exceptions import ConflictError, EmptyCartError, NotFoundError
from ..utils.logger import get_logger
from .cart_ledger import CartLedger
from .notifier import OrderNotifier

logger = get_logger(__name__)

COLLECTION = "orders"
ORDER_PREFIX = "DRS"
ORDER_CODE_LENGTH = 6
ORDER_CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_ORDER_NUMBER_ATTEMPTS = 5


def generate_order_number(prefix: str = ORDER_PREFIX) -> str:
    code = "".join(secrets.choice(ORDER_CODE_ALPHABET) for _ in range(ORDER_CODE_LENGTH))
    return f"{prefix}-{code}"


class OrderComposer:

    def __init__(
        self,
        repository: Repository,
        cart: CartLedger,
        notifier: Optional[OrderNotifier] = None,
        order_prefix: str = ORDER_PREFIX,
    ):
        self.repository = repository
        self.cart = cart
        self.notifier = notifier
        self.order_prefix = order_prefix

    def _unique_order_number(self) -> str:
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            candidate = generate_order_number(self.order_prefix)
            if not self.repository.find_one(COLLECTION, order_number=candidate):
                return candidate
            logger.warning("Order number collision, regenerating", order_number=candidate)
        raise ConflictError("Could not allocate a unique order number")

    def place_order(
        self,
        customer_name: str,
        phone_number: str,
        address: str,
        payment_method: PaymentMethod,
    ) -> Order:
        payment_method = PaymentMethod(payment_method)

        with self.repository.transaction():
            lines = self.cart.resolved_lines()
            if not lines:
                raise EmptyCartError()

            totals = self.cart.totals_for(lines)
            items = [
                OrderItem(
                    product_id=line.product_id,
                    title=line.product.title,
                    price=line.product.price,
                    quantity=line.quantity,
                    color=line.color,
                    size=line.size,
                    image=line.product.images[0] if line.product.images else None,
                )
                for line in lines
            ]
            record = self.repository.insert(COLLECTION, {
                "customer_name": customer_name,
                "phone_number": phone_number,
                "address": address,
                "payment_method": payment_method.value,
                "items": [item.model_dump(mode="json") for item in items],
                "subtotal": str(totals.subtotal),
                "shipping": str(totals.shipping),
                "tax": str(totals.tax),
                "total": str(totals.total),
                "order_number": self._unique_order_number(),
                "created_at": utcnow().isoformat(),
            })
            order = Order(**record)
            self.cart.clear()

        logger.info(
            "Order placed",
            order_number=order.order_number,
            total=str(order.total),
            item_count=totals.count,
            payment_method=order.payment_method.value,
        )

        if order.payment_method == PaymentMethod.WHATSAPP and self.notifier is not None:
            try:
                self.notifier.send_order(order.phone_number, order)
            except Exception as e:
                logger.error(
                    "WhatsApp notification failed",
                    order_number=order.order_number,
                    error=str(e),
                )
        return order

    def get_by_order_number(self, order_number: str) -> Order:
        record = self.repository.find_one(COLLECTION, order_number=order_number)
        if record is None:
            raise NotFoundError("Order not found")
        return Order(**record)
