# backend/models/order.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from database import Base

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String, nullable=False, default="Cash Customer")
    phone_number = Column(String, nullable=True)

    # Money columns, rounded to 2 decimals on write
    subtotal_amount = Column(Float, nullable=False)
    discount_amount = Column(Float, nullable=False, default=0.0)
    total_amount = Column(Float, nullable=False)
    tendered_amount = Column(Float, nullable=False)
    change_amount = Column(Float, CheckConstraint("change_amount >= 0"), nullable=False)

    payment_status = Column(String, nullable=False, default="completed")
    payment_method = Column(String, nullable=False, default="cash")

    created_at = Column(DateTime, default=datetime.now, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

# Denormalized snapshot of a sold line. product_id is kept for statistics only,
# it is not a foreign key so catalog edits and deletions leave receipts intact.
class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=True, index=True)
    product_name = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity >= 1"), nullable=False)
    discount_percentage = Column(Float, nullable=False, default=0.0)
    subtotal = Column(Float, nullable=False)
    total_after_discount = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    order = relationship("Order", back_populates="items")
