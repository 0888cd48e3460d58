import json
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from cleanstock.models.order import OrderStatus
from cleanstock.schemas.common import to_naive_utc
from cleanstock.schemas.product import ProductOut


class OrderCreate(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    due_date: datetime

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        return to_naive_utc(v)


class OrderTransition(BaseModel):
    note: str = ""


class ProductionRecord(BaseModel):
    amount: int = Field(gt=0)
    post_to_ledger: bool = False  # also book the units as a production_incoming delivery
    note: str = ""


class OrderOut(BaseModel):
    id: str
    product_id: str
    quantity: int
    produced: int
    status: OrderStatus
    status_history: list[dict] = []
    due_date: datetime
    created_at: datetime
    updated_at: datetime | None = None
    product: ProductOut | None = None

    model_config = {"from_attributes": True}

    @field_validator("status_history", mode="before")
    @classmethod
    def parse_status_history(cls, v):
        if isinstance(v, str):
            return json.loads(v) if v else []
        return v
