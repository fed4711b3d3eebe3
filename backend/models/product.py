# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from database import Base

# Model Product
# A catalog product sold at the register. The barcode lives in `code`.
# Order items never point here directly: they keep a snapshot of name and price.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    code = Column(String, unique=True, nullable=False, index=True)

    # Price and stock are guarded by constraints
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    stock = Column(Integer, CheckConstraint("stock >= 0"), nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.now)

    category = relationship("Category", back_populates="products")
