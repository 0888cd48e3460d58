import json
import logging

from sqlalchemy.orm import Session

from cleanstock.database import utcnow
from cleanstock.errors import InvalidTransition, NotFoundError, ValidationError
from cleanstock.models.delivery import DeliveryType
from cleanstock.models.order import NEXT_STATUS, OPEN_STATUSES, Order, OrderStatus
from cleanstock.schemas.delivery import DeliveryCreate
from cleanstock.schemas.order import OrderCreate
from cleanstock.services import delivery_service, product_service

logger = logging.getLogger(__name__)


def _add_status_history(order: Order, status: OrderStatus, note: str = "") -> None:
    history = json.loads(order.status_history) if order.status_history else []
    history.append({
        "status": status.value,
        "timestamp": utcnow().isoformat(),
        "note": note,
    })
    order.status_history = json.dumps(history)


def _set_status(order: Order, status: OrderStatus, note: str = "") -> None:
    logger.info("Order %s: %s -> %s", order.id, OrderStatus(order.status).value, status.value)
    order.status = status
    _add_status_history(order, status, note)


def create_order(db: Session, data: OrderCreate) -> Order:
    product_service.get_product(db, data.product_id)
    order = Order(
        product_id=data.product_id,
        quantity=data.quantity,
        produced=0,
        due_date=data.due_date,
        status=OrderStatus.PENDING,
    )
    _add_status_history(order, OrderStatus.PENDING, "Order created")
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Created production order %s: %d of product %s", order.id, order.quantity, order.product_id)
    return order


def get_order(db: Session, order_id: str) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError("Order not found")
    return order


def list_orders(db: Session, status: OrderStatus | None = None) -> list[Order]:
    q = db.query(Order)
    if status:
        q = q.filter(Order.status == status)
    return q.order_by(Order.created_at, Order.id).all()


def advance_order(db: Session, order_id: str, note: str = "") -> Order:
    """pending -> in_production -> completed."""
    order = get_order(db, order_id)
    current = OrderStatus(order.status)
    if current not in NEXT_STATUS:
        raise InvalidTransition(f"Cannot advance order in '{current.value}' status")
    _set_status(order, NEXT_STATUS[current], note)
    db.commit()
    db.refresh(order)
    return order


def cancel_order(db: Session, order_id: str, note: str = "") -> Order:
    order = get_order(db, order_id)
    current = OrderStatus(order.status)
    if current not in OPEN_STATUSES:
        raise InvalidTransition(f"Cannot cancel order in '{current.value}' status")
    _set_status(order, OrderStatus.CANCELLED, note or "Order cancelled")
    db.commit()
    db.refresh(order)
    return order


def record_production(
    db: Session, order_id: str, amount: int, post_to_ledger: bool = False, note: str = ""
) -> Order:
    """Add produced units, capped at the order quantity.

    A pending order starts production; reaching the target completes it. With
    `post_to_ledger` the accepted units are also booked as a production_incoming
    delivery in the same commit.
    """
    order = get_order(db, order_id)
    current = OrderStatus(order.status)
    if current not in OPEN_STATUSES:
        raise InvalidTransition(f"Cannot record production on order in '{current.value}' status")
    if amount <= 0:
        raise ValidationError("Produced amount must be positive")

    if current == OrderStatus.PENDING:
        _set_status(order, OrderStatus.IN_PRODUCTION, "Production started")

    accepted = min(amount, order.quantity - order.produced)
    order.produced += accepted
    logger.info("Order %s: produced %d/%d (+%d)", order.id, order.produced, order.quantity, accepted)

    if post_to_ledger and accepted > 0:
        delivery_service.record_delivery(
            db,
            DeliveryCreate(
                product_id=order.product_id,
                type=DeliveryType.PRODUCTION_INCOMING,
                quantity=accepted,
                description=note or f"Production for order {order.id}",
            ),
            commit=False,
        )

    if order.produced >= order.quantity:
        _set_status(order, OrderStatus.COMPLETED, "Target quantity produced")

    db.commit()
    db.refresh(order)
    return order
