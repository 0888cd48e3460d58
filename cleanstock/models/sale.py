import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cleanstock.database import Base, utcnow
from cleanstock.models.product import Product


class Sale(Base):
    __tablename__ = "sales"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    customer: Mapped[str] = mapped_column(String, default="")
    date: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    total: Mapped[str] = mapped_column(String, nullable=False)  # decimal as text, e.g. "49.90"
    recorded_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    product: Mapped[Optional[Product]] = relationship(
        Product,
        primaryjoin="foreign(Sale.product_id) == Product.id",
        viewonly=True,
        lazy="joined",
    )
