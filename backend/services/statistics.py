# backend/services/statistics.py
"""
Sales statistics over the full order history.

The functions accept any objects exposing the Order attributes they read
(`id`, `total_amount`, `created_at`, `items`) and, for items, `product_id`,
`product_name` and `quantity`. ORM rows work as they are.
"""
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Union

PERIODS = ("day", "month", "year")


class TopProduct(NamedTuple):
    product_id: int
    product_name: Optional[str]
    quantity: int


def _local(value: Union[date, datetime]) -> Union[date, datetime]:
    # Aware timestamps are compared on the local calendar
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone()
    return value


def _same_period(created_at: Union[date, datetime], reference: Union[date, datetime], period: str) -> bool:
    created_at, reference = _local(created_at), _local(reference)
    if created_at.year != reference.year:
        return False
    if period == "year":
        return True
    if created_at.month != reference.month:
        return False
    if period == "month":
        return True
    return created_at.day == reference.day


def sales_for_period(orders: Iterable[Any], period: str, reference_date: Union[date, datetime, None] = None) -> float:
    """Sum of total_amount for orders on the same day, month or year as reference_date."""
    if period not in PERIODS:
        raise ValueError(f"Unknown period: {period!r}")
    reference = reference_date or datetime.now()
    return sum(
        o.total_amount for o in orders
        if o.created_at is not None and _same_period(o.created_at, reference, period)
    )


def top_product(orders: Iterable[Any]) -> Optional[TopProduct]:
    # dict keeps first-seen order, max() keeps the first of equal maxima
    quantities: Dict[int, int] = {}
    names: Dict[int, str] = {}
    for order in orders:
        for item in order.items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity
            names.setdefault(item.product_id, item.product_name)

    if not quantities:
        return None
    product_id = max(quantities, key=quantities.get)
    return TopProduct(product_id, names.get(product_id), quantities[product_id])


def average_order_value(orders: Iterable[Any]) -> float:
    orders = list(orders)
    if not orders:
        return 0
    return sum(o.total_amount for o in orders) / len(orders)


def recent_sales(orders: Iterable[Any], limit: int = 5) -> List[Dict[str, Any]]:
    """Items of the `limit` newest orders, each tagged with its order id and time."""
    newest = sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)[:limit]
    return [
        {
            "order_id": order.id,
            "order_time": order.created_at,
            "product_id": item.product_id,
            "product_name": item.product_name,
            "quantity": item.quantity,
            "price": item.price,
            "total_after_discount": item.total_after_discount,
        }
        for order in newest
        for item in order.items
    ]
