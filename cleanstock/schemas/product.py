from datetime import datetime

from pydantic import BaseModel, Field

from cleanstock.models.product import ProductType


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    type: ProductType
    capacity: str = ""  # e.g. "500ml"
    unit: str = Field(min_length=1)
    current_stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0)


class ProductUpdate(BaseModel):
    name: str | None = None
    type: ProductType | None = None
    capacity: str | None = None
    unit: str | None = None
    # Direct stock edits bypass the ledger
    current_stock: int | None = None
    min_stock: int | None = Field(default=None, ge=0)


class ProductOut(BaseModel):
    id: str
    name: str
    type: ProductType
    capacity: str
    unit: str
    current_stock: int
    min_stock: int
    is_low_stock: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
