# schemas/stats.py
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel


class TopProductOut(BaseModel):
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    total_quantity_sold: int


# Dashboard cards
class StatsSummary(BaseModel):
    sales_today: float
    sales_this_month: float
    sales_this_year: float
    total_products: int
    total_orders: int
    average_order_value: float
    top_product: Optional[TopProductOut] = None
    # Card labels as the dashboard prints them (1.5K, 2.3M, 1,204)
    display: Dict[str, str] = {}


class RecentSaleItem(BaseModel):
    order_id: int
    order_time: datetime
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    price: float
    total_after_discount: float


class RecentSalesResponse(BaseModel):
    data: List[RecentSaleItem]
