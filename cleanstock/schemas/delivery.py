from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from cleanstock.models.delivery import DeliveryType
from cleanstock.schemas.common import to_naive_utc
from cleanstock.schemas.product import ProductOut


class DeliveryCreate(BaseModel):
    product_id: str
    type: DeliveryType
    quantity: int = Field(gt=0)
    description: str = ""
    date: datetime | None = None  # defaults to now

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class DeliveryOut(BaseModel):
    id: str
    product_id: str
    type: DeliveryType
    quantity: int
    description: str
    date: datetime
    previous_stock: int
    current_stock: int
    recorded_at: datetime
    product: ProductOut | None = None  # None once the product is deleted

    model_config = {"from_attributes": True}
