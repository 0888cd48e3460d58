import uuid
from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cleanstock.database import Base, utcnow
from cleanstock.models.product import Product


class DeliveryType(str, PyEnum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"
    PRODUCTION_INCOMING = "production_incoming"
    PRODUCTION_OUTGOING = "production_outgoing"

    @property
    def sign(self) -> int:
        if self in (DeliveryType.INCOMING, DeliveryType.PRODUCTION_INCOMING):
            return 1
        return -1


class Delivery(Base):
    """Ledger entry: one stock movement, never modified after insert."""

    __tablename__ = "deliveries"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    # No FK constraint: entries outlive the product they reference
    product_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    type: Mapped[str] = mapped_column(
        Enum(DeliveryType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    date: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    # Stock snapshot around this movement
    previous_stock: Mapped[int] = mapped_column(Integer, nullable=False)
    current_stock: Mapped[int] = mapped_column(Integer, nullable=False)

    recorded_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    product: Mapped[Optional[Product]] = relationship(
        Product,
        primaryjoin="foreign(Delivery.product_id) == Product.id",
        viewonly=True,
        lazy="joined",
    )
