# backend/schemas/variant.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime


# Input schema for a new label variant; the id is generated server side
class VariantCreate(BaseModel):
    size: str = Field(min_length=1)
    price: float = Field(gt=0)

    @field_validator("size")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class VariantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    size: str
    price: float
    created_at: Optional[datetime] = None


# Selection of variants to print as a label sheet
class LabelPrintRequest(BaseModel):
    variant_ids: List[str] = Field(min_length=1)


class RecentBarcodeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    variant_id: str
    size: str
    price: float
    created_at: datetime
