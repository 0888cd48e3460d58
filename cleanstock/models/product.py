import uuid
from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import DateTime, Enum, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from cleanstock.database import Base, utcnow


class ProductType(str, PyEnum):
    RAW_MATERIAL = "raw_material"
    INPUT_GOOD = "input_good"
    FINISHED_GOOD = "finished_good"


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String, nullable=False)
    type: Mapped[str] = mapped_column(
        Enum(ProductType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    capacity: Mapped[str] = mapped_column(String, default="")  # e.g. 500ml, 1L
    unit: Mapped[str] = mapped_column(String, nullable=False)  # e.g. un, litre

    # Cached net effect of the ledger; the deliveries table is the history
    current_stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    min_stock: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock
