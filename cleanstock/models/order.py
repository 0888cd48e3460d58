import uuid
from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, Enum, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cleanstock.database import Base, utcnow
from cleanstock.models.product import Product


class OrderStatus(str, PyEnum):
    PENDING = "pending"
    IN_PRODUCTION = "in_production"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Forward moves; cancellation is handled separately
NEXT_STATUS = {
    OrderStatus.PENDING: OrderStatus.IN_PRODUCTION,
    OrderStatus.IN_PRODUCTION: OrderStatus.COMPLETED,
}

OPEN_STATUSES = (OrderStatus.PENDING, OrderStatus.IN_PRODUCTION)


class Order(Base):
    """Production order: demand for `quantity` units of a product by `due_date`."""

    __tablename__ = "production_orders"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    product_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    produced: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(OrderStatus, values_callable=lambda x: [e.value for e in x]),
        default=OrderStatus.PENDING,
    )
    status_history: Mapped[str] = mapped_column(Text, default="[]")  # JSON list of {status, timestamp, note}
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    product: Mapped[Optional[Product]] = relationship(
        Product,
        primaryjoin="foreign(Order.product_id) == Product.id",
        viewonly=True,
        lazy="joined",
    )
