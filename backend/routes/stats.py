# backend/routes/stats.py

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
import logging

from database import get_db
from utils.tokenJWT import get_current_user
from models.users import User
from models.order import Order
from models.product import Product
from schemas.stats import StatsSummary, TopProductOut, RecentSalesResponse, RecentSaleItem
from services import statistics
from utils.formatting import format_currency, format_date, format_number, shorten_number

router = APIRouter(
    prefix="/stats",
    tags=["Stats"]
)
logger = logging.getLogger(__name__)


def _load_orders(db: Session) -> List[Order]:
    # Whole history with items, the aggregates run in Python
    try:
        return db.query(Order).options(joinedload(Order.items)).all()
    except SQLAlchemyError as e:
        logger.exception("Failed to load orders for statistics: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch data")


# === Endpoint 1: Dashboard Summary ===

@router.get("/summary", response_model=StatsSummary)
def get_stats_summary(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    orders = _load_orders(db)
    now = datetime.now()

    top = statistics.top_product(orders)
    top_out = None
    if top is not None:
        top_out = TopProductOut(
            product_id=top.product_id,
            product_name=top.product_name,
            total_quantity_sold=top.quantity,
        )

    sales = {period: round(statistics.sales_for_period(orders, period, now), 2) for period in statistics.PERIODS}
    total_products = db.query(Product).count()
    average = round(statistics.average_order_value(orders), 2)

    return StatsSummary(
        sales_today=sales["day"],
        sales_this_month=sales["month"],
        sales_this_year=sales["year"],
        total_products=total_products,
        total_orders=len(orders),
        average_order_value=average,
        top_product=top_out,
        display={
            "as_of": format_date(now),
            "sales_today": shorten_number(sales["day"]),
            "sales_this_month": shorten_number(sales["month"]),
            "sales_this_year": shorten_number(sales["year"]),
            "average_order_value": format_currency(average),
            "total_products": format_number(total_products),
            "total_orders": format_number(len(orders)),
        },
    )

# === Endpoint 2: Recent sales feed ===

@router.get("/recent-sales", response_model=RecentSalesResponse)
def get_recent_sales(
    limit: int = Query(5, ge=1, le=50, description="Number of most recent orders"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    orders = _load_orders(db)
    rows = statistics.recent_sales(orders, limit=limit)
    return RecentSalesResponse(data=[RecentSaleItem(**row) for row in rows])
