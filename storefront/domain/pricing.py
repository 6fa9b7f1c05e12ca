from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from pydantic import BaseModel

from storefront.domain.models import BasketItem

TAX_RATE = Decimal("0.08")
SHIPPING_FEE = Decimal("10.00")
FREE_SHIPPING_THRESHOLD = Decimal("100.00")

CENTS = Decimal("0.01")


def money(value) -> Decimal:
    """Приведение к денежному формату: два знака, округление half-up"""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class BasketTotals(BaseModel):
    total_items: int
    total_price: Decimal


class OrderTotals(BaseModel):
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


def summarize_basket(items: Iterable[BasketItem]) -> BasketTotals:
    total_items = 0
    total_price = Decimal("0")
    for line in items:
        total_items += line.quantity
        total_price += line.unit_price * line.quantity
    return BasketTotals(total_items=total_items, total_price=money(total_price))


def calculate_order_totals(subtotal: Decimal) -> OrderTotals:
    """Налог 8%, доставка 10 бесплатна от 100"""
    subtotal = money(subtotal)
    tax = money(subtotal * TAX_RATE)
    shipping = Decimal("0.00") if subtotal >= FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    return OrderTotals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=money(subtotal + tax + shipping),
    )
