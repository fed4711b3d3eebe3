# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, List
from datetime import datetime


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Schema for creating a new product; the category is picked by name
class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1, description="Category name")
    code: str = Field(min_length=1, description="Barcode")
    price: float = Field(ge=0)
    stock: int = Field(ge=0)

    @field_validator("name", "category", "code")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


# Full product representation
class ProductOut(ORMBase):
    id: int
    name: str
    category_id: int
    category_name: Optional[str] = None
    code: str
    price: float
    stock: int
    created_at: Optional[datetime] = None


# Response for the barcode availability check
class CodeCheck(BaseModel):
    code: str
    exists: bool


# Paginated response for product listings
class ProductListPage(ORMBase):
    items: List[ProductOut]
    total: int
    page: int
    page_size: int
