from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cleanstock.api.auth import get_current_user
from cleanstock.database import get_db
from cleanstock.models.delivery import DeliveryType
from cleanstock.models.user import User
from cleanstock.schemas.delivery import DeliveryCreate, DeliveryOut
from cleanstock.services import auth_service, delivery_service

router = APIRouter(prefix="/deliveries", tags=["Deliveries"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=DeliveryOut, status_code=201)
def record_delivery(data: DeliveryCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    delivery = delivery_service.record_delivery(db, data)
    auth_service.log_activity(
        db, user, "record_delivery",
        detail=f"{delivery.type.value} {delivery.quantity} of {delivery.product_id}",
    )
    return delivery


@router.get("", response_model=list[DeliveryOut])
def list_deliveries(
    product_id: str | None = None,
    type: DeliveryType | None = None,
    db: Session = Depends(get_db),
):
    return delivery_service.list_deliveries(db, product_id=product_id, delivery_type=type)


@router.get("/{delivery_id}", response_model=DeliveryOut)
def get_delivery(delivery_id: str, db: Session = Depends(get_db)):
    return delivery_service.get_delivery(db, delivery_id)
