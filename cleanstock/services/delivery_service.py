import logging

from sqlalchemy.orm import Session

from cleanstock.errors import NotFoundError
from cleanstock.models.delivery import Delivery, DeliveryType
from cleanstock.schemas.delivery import DeliveryCreate
from cleanstock.services.product_service import apply_stock_change

logger = logging.getLogger(__name__)


def record_delivery(db: Session, data: DeliveryCreate, commit: bool = True) -> Delivery:
    """Apply a stock movement and write its ledger entry with the before/after snapshot.

    An unknown product raises NotFoundError before anything is written.
    """
    movement = DeliveryType(data.type)
    delta = movement.sign * data.quantity
    previous, current = apply_stock_change(db, data.product_id, delta)

    delivery = Delivery(
        product_id=data.product_id,
        type=movement,
        quantity=data.quantity,
        description=data.description,
        previous_stock=previous,
        current_stock=current,
    )
    if data.date is not None:
        delivery.date = data.date
    db.add(delivery)

    if commit:
        db.commit()
        db.refresh(delivery)
    else:
        db.flush()
    logger.info(
        "Recorded %s delivery of %d for product %s: %d -> %d",
        movement.value, data.quantity, data.product_id, previous, current,
    )
    return delivery


def get_delivery(db: Session, delivery_id: str) -> Delivery:
    delivery = db.query(Delivery).filter(Delivery.id == delivery_id).first()
    if not delivery:
        raise NotFoundError("Delivery not found")
    return delivery


def list_deliveries(
    db: Session, product_id: str | None = None, delivery_type: DeliveryType | None = None
) -> list[Delivery]:
    q = db.query(Delivery)
    if product_id:
        q = q.filter(Delivery.product_id == product_id)
    if delivery_type:
        q = q.filter(Delivery.type == delivery_type)
    return q.order_by(Delivery.recorded_at, Delivery.id).all()


def recent_deliveries(db: Session, limit: int) -> list[Delivery]:
    return (
        db.query(Delivery)
        .order_by(Delivery.date.desc(), Delivery.recorded_at.desc())
        .limit(limit)
        .all()
    )
