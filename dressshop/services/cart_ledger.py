"""
Cart ledger.

There is one cart shared by every shopper (no customer or session key),
as in a single-tenant storefront. Lines are unique per
(product, color, size): adding the same combination again increases the
quantity of the existing line. Prices are looked up at read time; they are
frozen only when an order is placed.
"""

from decimal import Decimal
from typing import List, Optional

from ..models.cart import CartLine, CartLineWithProduct, CartSummary
from ..storage.base import Repository
from ..utils.exceptions import NotFoundError, ValidationError
from ..utils.logger import get_logger
from .catalog import ProductCatalog
from .pricing import SHIPPING_FLAT, TAX_RATE, Totals, compute_totals

logger = get_logger(__name__)

COLLECTION = "cart_items"


class CartLedger:

    def __init__(
        self,
        repository: Repository,
        catalog: ProductCatalog,
        shipping_flat: Decimal = SHIPPING_FLAT,
        tax_rate: Decimal = TAX_RATE,
    ):
        self.repository = repository
        self.catalog = catalog
        self.shipping_flat = shipping_flat
        self.tax_rate = tax_rate

    def lines(self) -> List[CartLine]:
        lines = [CartLine(**r) for r in self.repository.all(COLLECTION)]
        return sorted(lines, key=lambda line: line.id)

    def resolved_lines(self) -> List[CartLineWithProduct]:
        """Lines joined with their current product; lines whose product is gone are skipped"""
        resolved = []
        with self.repository.transaction():
            for line in self.lines():
                product = self.catalog.find(line.product_id)
                if product is None:
                    logger.warning("Cart line references missing product", line_id=line.id, product_id=line.product_id)
                    continue
                resolved.append(CartLineWithProduct(**line.model_dump(), product=product))
        return resolved

    def totals_for(self, lines: List[CartLineWithProduct]) -> Totals:
        return compute_totals(
            ((line.product.price, line.quantity) for line in lines),
            shipping_flat=self.shipping_flat,
            tax_rate=self.tax_rate,
        )

    def list(self) -> CartSummary:
        items = self.resolved_lines()
        totals = self.totals_for(items)
        return CartSummary(
            items=items,
            subtotal=float(totals.subtotal),
            shipping=float(totals.shipping),
            tax=float(totals.tax),
            total=float(totals.total),
            count=totals.count,
        )

    def add(self, product_id: int, quantity: int = 1, color: Optional[str] = None, size: Optional[str] = None) -> CartLine:
        """Add a line, merging into an existing line with the same product/color/size"""
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", field="quantity")
        with self.repository.transaction():
            self.catalog.get(product_id)
            existing = self.repository.find_one(COLLECTION, product_id=product_id, color=color, size=size)
            if existing:
                record = self.repository.update(
                    COLLECTION, existing["id"], {"quantity": existing["quantity"] + quantity}
                )
            else:
                record = self.repository.insert(COLLECTION, {
                    "product_id": product_id,
                    "quantity": quantity,
                    "color": color,
                    "size": size,
                })
        return CartLine(**record)

    def set_quantity(self, line_id: int, quantity: int) -> Optional[CartLine]:
        """Update a line's quantity. Zero or less removes the line and returns None."""
        with self.repository.transaction():
            if quantity <= 0:
                self.repository.delete(COLLECTION, line_id)
                return None
            record = self.repository.update(COLLECTION, line_id, {"quantity": quantity})
        if record is None:
            raise NotFoundError("Cart item not found")
        return CartLine(**record)

    def remove(self, line_id: int) -> bool:
        return self.repository.delete(COLLECTION, line_id)

    def clear(self) -> None:
        self.repository.clear(COLLECTION)
