from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cleanstock.api.auth import get_current_user
from cleanstock.database import get_db
from cleanstock.models.order import OrderStatus
from cleanstock.models.user import User
from cleanstock.schemas.order import OrderCreate, OrderOut, OrderTransition, ProductionRecord
from cleanstock.services import auth_service, order_service

router = APIRouter(prefix="/orders", tags=["Orders"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=OrderOut, status_code=201)
def create_order(data: OrderCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    order = order_service.create_order(db, data)
    auth_service.log_activity(db, user, "create_order", detail=f"{order.id}: {order.quantity} of {order.product_id}")
    return order


@router.get("", response_model=list[OrderOut])
def list_orders(status: OrderStatus | None = None, db: Session = Depends(get_db)):
    return order_service.list_orders(db, status=status)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: str, db: Session = Depends(get_db)):
    return order_service.get_order(db, order_id)


@router.post("/{order_id}/advance", response_model=OrderOut)
def advance_order(
    order_id: str,
    data: OrderTransition | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    order = order_service.advance_order(db, order_id, note=data.note if data else "")
    auth_service.log_activity(db, user, "advance_order", detail=f"{order.id} -> {order.status.value}")
    return order


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: str,
    data: OrderTransition | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    order = order_service.cancel_order(db, order_id, note=data.note if data else "")
    auth_service.log_activity(db, user, "cancel_order", detail=order.id)
    return order


@router.post("/{order_id}/production", response_model=OrderOut)
def record_production(
    order_id: str, data: ProductionRecord, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    order = order_service.record_production(
        db, order_id, data.amount, post_to_ledger=data.post_to_ledger, note=data.note
    )
    auth_service.log_activity(
        db, user, "record_production", detail=f"{order.id}: {order.produced}/{order.quantity}"
    )
    return order
