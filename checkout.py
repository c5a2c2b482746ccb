"""Cart and order totals.

Both the cart preview and order creation go through ``summarize`` so the two
can never disagree.
"""

from dataclasses import dataclass
from typing import Iterable

from schemas import CartItem

TAX_RATE = 0.08
SHIPPING_FEE = 15.0
FREE_SHIPPING_OVER = 100.0


@dataclass(frozen=True)
class CheckoutSummary:
    subtotal: float
    tax: float
    shipping: float
    total: float


def subtotal(items: Iterable[CartItem]) -> float:
    return sum(i.price * i.quantity for i in items)


def summarize(items: Iterable[CartItem]) -> CheckoutSummary:
    sub = subtotal(items)
    tax = sub * TAX_RATE
    shipping = 0.0 if sub > FREE_SHIPPING_OVER else SHIPPING_FEE
    return CheckoutSummary(subtotal=sub, tax=tax, shipping=shipping, total=sub + tax + shipping)


def grand_total(items: Iterable[CartItem]) -> float:
    return summarize(items).total
