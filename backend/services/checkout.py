# backend/services/checkout.py
import logging
import math
import re
from typing import NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from models.order import Order, OrderItem
from services.calculator import Cart
from services.errors import StoreError, ValidationError

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"[0-9+\- ]+")


def _money(value: float) -> float:
    return round(value, 2)


class CheckoutTotals(NamedTuple):
    subtotal: float
    discount: float
    total: float
    tendered: float
    change: float


def validate_checkout(cart: Cart, phone_number: Optional[str], tendered_amount: float) -> CheckoutTotals:
    """Checks a sale before anything is written and returns its money figures.

    Order matters: phone format first, then tender, then the empty cart guard.
    """
    if phone_number and not PHONE_PATTERN.fullmatch(phone_number):
        raise ValidationError("invalid phone format")

    total = _money(cart.total)
    # NaN compares False against anything, so non-finite tender is refused outright
    if not math.isfinite(tendered_amount) or tendered_amount < total:
        raise ValidationError("insufficient tender")

    if cart.is_empty:
        raise ValidationError("cart is empty")

    return CheckoutTotals(
        subtotal=_money(cart.subtotal),
        discount=_money(cart.discount),
        total=total,
        tendered=_money(tendered_amount),
        change=_money(tendered_amount - total),
    )


def checkout(
    db: Session,
    cart: Cart,
    *,
    tendered_amount: float,
    customer_name: Optional[str] = None,
    phone_number: Optional[str] = None,
    payment_method: str = "cash",
) -> Order:
    """Validates and persists a completed sale.

    Header and items are written in one transaction: the header is flushed
    to get its id, the items follow, then a single commit. Any database
    error rolls both back and is raised as StoreError.
    """
    phone_number = (phone_number or "").strip() or None
    totals = validate_checkout(cart, phone_number, tendered_amount)

    order = Order(
        customer_name=(customer_name or "").strip() or settings.DEFAULT_CUSTOMER_NAME,
        phone_number=phone_number,
        subtotal_amount=totals.subtotal,
        discount_amount=totals.discount,
        total_amount=totals.total,
        tendered_amount=totals.tendered,
        change_amount=totals.change,
        payment_status="completed",
        payment_method=payment_method,
    )

    stage = "order"
    try:
        db.add(order)
        db.flush()

        stage = "items"
        db.add_all([
            OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                product_name=line.product_name,
                price=line.price,
                quantity=line.quantity,
                discount_percentage=line.discount_percent,
                subtotal=_money(line.subtotal),
                total_after_discount=_money(line.total_after_discount),
            )
            for line in cart
        ])
        db.flush()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Checkout failed while saving %s: %s", stage, e)
        raise StoreError(f"Failed to save {stage}", stage=stage) from e

    db.refresh(order)
    logger.info("Order %s completed: total=%.2f change=%.2f items=%d",
                order.id, order.total_amount, order.change_amount, len(cart))
    return order
