from datetime import datetime
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, Field, field_validator

from cleanstock.schemas.common import to_naive_utc
from cleanstock.schemas.product import ProductOut

CENTS = Decimal("0.01")


def normalize_total(value: str) -> str:
    """Parse a money amount given as text and return it with two decimals."""
    try:
        amount = Decimal(str(value).strip())
        if amount.is_finite() and amount >= 0:
            # quantize fails for amounts beyond the context precision
            return str(amount.quantize(CENTS))
    except InvalidOperation:
        pass
    raise ValueError(f"Invalid total: {value!r}")


class SaleCreate(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    customer: str = ""
    total: str
    date: datetime | None = None

    @field_validator("total", mode="before")
    @classmethod
    def parse_total(cls, v):
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            v = str(v)
        if not isinstance(v, str):
            raise ValueError("total must be a decimal string")
        return normalize_total(v)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class SaleOut(BaseModel):
    id: str
    product_id: str
    quantity: int
    customer: str
    date: datetime
    total: str
    recorded_at: datetime
    product: ProductOut | None = None

    model_config = {"from_attributes": True}
