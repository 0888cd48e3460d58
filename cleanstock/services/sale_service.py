import logging

from sqlalchemy.orm import Session

from cleanstock.errors import NotFoundError
from cleanstock.models.sale import Sale
from cleanstock.schemas.sale import SaleCreate
from cleanstock.services.product_service import apply_stock_change

logger = logging.getLogger(__name__)


def record_sale(db: Session, data: SaleCreate) -> Sale:
    """Register a sale and take its quantity out of stock, both in one commit."""
    previous, current = apply_stock_change(db, data.product_id, -data.quantity)

    sale = Sale(
        product_id=data.product_id,
        quantity=data.quantity,
        customer=data.customer,
        total=data.total,
    )
    if data.date is not None:
        sale.date = data.date
    db.add(sale)
    db.commit()
    db.refresh(sale)
    logger.info(
        "Recorded sale of %d for product %s (total %s): stock %d -> %d",
        data.quantity, data.product_id, data.total, previous, current,
    )
    return sale


def get_sale(db: Session, sale_id: str) -> Sale:
    sale = db.query(Sale).filter(Sale.id == sale_id).first()
    if not sale:
        raise NotFoundError("Sale not found")
    return sale


def list_sales(db: Session, product_id: str | None = None) -> list[Sale]:
    q = db.query(Sale)
    if product_id:
        q = q.filter(Sale.product_id == product_id)
    return q.order_by(Sale.recorded_at, Sale.id).all()


def recent_sales(db: Session, limit: int) -> list[Sale]:
    return (
        db.query(Sale)
        .order_by(Sale.date.desc(), Sale.recorded_at.desc())
        .limit(limit)
        .all()
    )
