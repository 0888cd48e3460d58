from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cleanstock.api.auth import get_current_user
from cleanstock.database import get_db
from cleanstock.models.product import ProductType
from cleanstock.models.user import User
from cleanstock.schemas.delivery import DeliveryOut
from cleanstock.schemas.product import ProductCreate, ProductOut, ProductUpdate
from cleanstock.services import auth_service, product_service

router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(get_current_user)])


@router.post("", response_model=ProductOut, status_code=201)
def create_product(data: ProductCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    product = product_service.create_product(db, data)
    auth_service.log_activity(db, user, "create_product", detail=f"{product.name} ({product.id})")
    return product


@router.get("", response_model=list[ProductOut])
def list_products(type: ProductType | None = None, db: Session = Depends(get_db)):
    return product_service.list_products(db, product_type=type)


@router.get("/low-stock", response_model=list[ProductOut])
def low_stock(db: Session = Depends(get_db)):
    return product_service.get_low_stock(db)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return product_service.get_product(db, product_id)


@router.put("/{product_id}", response_model=ProductOut)
@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str, data: ProductUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    product = product_service.update_product(db, product_id, data)
    fields = ", ".join(sorted(data.model_dump(exclude_unset=True)))
    auth_service.log_activity(db, user, "update_product", detail=f"{product.id}: {fields}")
    return product


@router.delete("/{product_id}")
def delete_product(product_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    product_service.delete_product(db, product_id)
    auth_service.log_activity(db, user, "delete_product", detail=product_id)
    return {"message": "Product deleted"}


@router.get("/{product_id}/deliveries", response_model=list[DeliveryOut])
def product_movements(product_id: str, db: Session = Depends(get_db)):
    """Ledger entries of one product, oldest first."""
    return product_service.get_movements(db, product_id)
