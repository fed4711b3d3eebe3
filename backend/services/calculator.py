# backend/services/calculator.py
"""
Order calculator.

Turns cart lines (price, quantity, discount percent) into subtotal, discount
and total figures. Everything here is pure: no database, no I/O.
"""
from typing import Iterable, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict

from services.errors import ValidationError


class LineTotals(NamedTuple):
    subtotal: float
    discount_amount: float
    total_after_discount: float


def calculate_line(price: float, quantity: int, discount_percent: float = 0) -> LineTotals:
    if price < 0:
        raise ValidationError("price must not be negative")
    if quantity < 1:
        raise ValidationError("quantity must be at least 1")
    if discount_percent < 0 or discount_percent > 100:
        raise ValidationError("discount must be between 0 and 100")

    subtotal = price * quantity
    discount_amount = subtotal * discount_percent / 100
    return LineTotals(subtotal, discount_amount, subtotal - discount_amount)


class CartLine(BaseModel):
    """Snapshot of a product as it was put into the cart.

    Only name and price are copied from the catalog, so the persisted order
    item stays the same when the catalog product changes later.
    """
    model_config = ConfigDict(frozen=True)

    product_id: Optional[int] = None
    product_name: str
    price: float
    quantity: int = 1
    discount_percent: float = 0

    def totals(self) -> LineTotals:
        return calculate_line(self.price, self.quantity, self.discount_percent)

    @property
    def subtotal(self) -> float:
        return self.totals().subtotal

    @property
    def discount_amount(self) -> float:
        return self.totals().discount_amount

    @property
    def total_after_discount(self) -> float:
        return self.totals().total_after_discount


def cart_subtotal(lines: Iterable[CartLine]) -> float:
    return sum(line.subtotal for line in lines)


def cart_discount(lines: Iterable[CartLine]) -> float:
    return sum(line.subtotal - line.total_after_discount for line in lines)


def cart_total(lines: Iterable[CartLine]) -> float:
    return sum(line.total_after_discount for line in lines)


class Cart:
    """Cart aggregate handed to the checkout orchestrator."""

    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self._lines: List[CartLine] = []
        for line in lines or []:
            self.add(line)

    def add(self, line: CartLine) -> CartLine:
        # Reject bad values when the line goes in, not at checkout
        line.totals()
        self._lines.append(line)
        return line

    def remove(self, index: int) -> CartLine:
        if index < 0 or index >= len(self._lines):
            raise IndexError(f"no cart line at position {index}")
        return self._lines.pop(index)

    def clear(self) -> None:
        self._lines = []

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def subtotal(self) -> float:
        return cart_subtotal(self._lines)

    @property
    def discount(self) -> float:
        return cart_discount(self._lines)

    @property
    def total(self) -> float:
        return cart_total(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self._lines)
