from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cleanstock.api.auth import get_current_user
from cleanstock.database import get_db
from cleanstock.models.user import User
from cleanstock.schemas.sale import SaleCreate, SaleOut
from cleanstock.services import auth_service, sale_service

router = APIRouter(prefix="/sales", tags=["Sales"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=SaleOut, status_code=201)
def record_sale(data: SaleCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    sale = sale_service.record_sale(db, data)
    auth_service.log_activity(
        db, user, "record_sale", detail=f"{sale.quantity} of {sale.product_id} for {sale.total}"
    )
    return sale


@router.get("", response_model=list[SaleOut])
def list_sales(product_id: str | None = None, db: Session = Depends(get_db)):
    return sale_service.list_sales(db, product_id=product_id)


@router.get("/{sale_id}", response_model=SaleOut)
def get_sale(sale_id: str, db: Session = Depends(get_db)):
    return sale_service.get_sale(db, sale_id)
