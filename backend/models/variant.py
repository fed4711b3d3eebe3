# backend/models/variant.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint
from datetime import datetime
from database import Base

# Size/price combination used only for printing barcode labels.
# Not linked to the product catalog; the id itself is the encoded barcode.
class Variant(Base):
    __tablename__ = "variants"

    id = Column(String, primary_key=True, index=True)
    size = Column(String, nullable=False)
    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    created_at = Column(DateTime, default=datetime.now)


# Append-only history of printed labels
class RecentBarcode(Base):
    __tablename__ = "recent_barcodes"

    id = Column(Integer, primary_key=True, index=True)
    variant_id = Column(String, nullable=False, index=True)
    size = Column(String, nullable=False)
    price = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.now, index=True)
