from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime


# One requested cart line; name and price are taken from the catalog
class CheckoutLine(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    discount_percent: float = Field(default=0, ge=0, le=100)


# Input schema for completing a sale at the register
class CheckoutRequest(BaseModel):
    items: List[CheckoutLine]
    tendered_amount: float = Field(allow_inf_nan=False)
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    payment_method: str = "cash"


# Output schema for a persisted order line snapshot
class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: Optional[int] = None
    product_name: str
    price: float
    quantity: int
    discount_percentage: float
    subtotal: float
    total_after_discount: float


# Output schema representing the full order details
class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_name: str
    phone_number: Optional[str] = None
    subtotal_amount: float
    discount_amount: float
    total_amount: float
    tendered_amount: float
    change_amount: float
    payment_status: str
    payment_method: str
    created_at: datetime
    items: List[OrderItemOut]


# Schema for paginated order lists
class OrdersPage(BaseModel):
    items: List[OrderResponse]
    total: int
    page: int
    page_size: int
