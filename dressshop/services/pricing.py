"""Cart and order totals (shared so a placed order matches the cart it came from)"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple

CENT = Decimal("0.01")
SHIPPING_FLAT = Decimal("9.99")
TAX_RATE = Decimal("0.08")


def to_money(value) -> Decimal:
    """Round half-up to two decimal places"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    count: int


def compute_totals(
    lines: Iterable[Tuple[Decimal, int]],
    shipping_flat: Decimal = SHIPPING_FLAT,
    tax_rate: Decimal = TAX_RATE,
) -> Totals:
    """lines are (unit price, quantity) pairs"""
    raw_subtotal = Decimal("0")
    count = 0
    for price, quantity in lines:
        raw_subtotal += Decimal(str(price)) * quantity
        count += quantity
    subtotal = to_money(raw_subtotal)
    shipping = to_money(shipping_flat) if subtotal > 0 else to_money(0)
    tax = to_money(subtotal * Decimal(str(tax_rate)))
    total = to_money(subtotal + shipping + tax)
    return Totals(subtotal=subtotal, shipping=shipping, tax=tax, total=total, count=count)
