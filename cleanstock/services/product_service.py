import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from cleanstock.config import settings
from cleanstock.errors import LowStockViolation, NotFoundError
from cleanstock.models.delivery import Delivery, DeliveryType
from cleanstock.models.product import Product, ProductType
from cleanstock.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def create_product(db: Session, data: ProductCreate) -> Product:
    product = Product(
        name=data.name,
        type=data.type,
        capacity=data.capacity,
        unit=data.unit,
        current_stock=data.current_stock,
        min_stock=data.min_stock,
    )
    db.add(product)
    db.flush()

    # Opening stock goes through the ledger so the deliveries add up to current_stock
    if data.current_stock > 0:
        db.add(Delivery(
            product_id=product.id,
            type=DeliveryType.INCOMING,
            quantity=data.current_stock,
            description="Initial stock on product creation",
            previous_stock=0,
            current_stock=data.current_stock,
        ))

    db.commit()
    db.refresh(product)
    logger.info("Created product %s (%s) with stock %d", product.name, product.id, product.current_stock)
    return product


def get_product(db: Session, product_id: str) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product not found")
    return product


def list_products(db: Session, product_type: ProductType | None = None) -> list[Product]:
    q = db.query(Product)
    if product_type:
        q = q.filter(Product.type == product_type)
    return q.order_by(Product.created_at, Product.name).all()


def update_product(db: Session, product_id: str, data: ProductUpdate) -> Product:
    product = get_product(db, product_id)
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    if "current_stock" in update_data and update_data["current_stock"] != product.current_stock:
        logger.warning(
            "Stock of product %s set directly from %d to %d, bypassing the ledger",
            product.id, product.current_stock, update_data["current_stock"],
        )
    for field, value in update_data.items():
        setattr(product, field, value)
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: str) -> None:
    product = get_product(db, product_id)
    db.delete(product)
    db.commit()
    logger.info("Deleted product %s; its ledger entries are kept", product_id)


def get_low_stock(db: Session) -> list[Product]:
    # Row-wise comparison of the two columns
    return db.query(Product).filter(Product.current_stock <= Product.min_stock).order_by(Product.name).all()


def get_movements(db: Session, product_id: str) -> list[Delivery]:
    get_product(db, product_id)
    return (
        db.query(Delivery)
        .filter(Delivery.product_id == product_id)
        .order_by(Delivery.recorded_at, Delivery.id)
        .all()
    )


def apply_stock_change(db: Session, product_id: str, delta: int) -> tuple[int, int]:
    """Add `delta` to a product's stock in one UPDATE and return (previous, current).

    The increment happens in SQL so concurrent movements on the same product
    cannot overwrite each other. Nothing is committed here; the caller commits
    together with its ledger or sale row.
    """
    table = Product.__table__
    stmt = (
        update(table)
        .where(table.c.id == product_id)
        .values(current_stock=table.c.current_stock + delta)
    )
    if delta < 0 and not settings.ALLOW_NEGATIVE_STOCK:
        stmt = stmt.where(table.c.current_stock + delta >= 0)
    result = db.execute(stmt)

    product = db.get(Product, product_id, populate_existing=True)
    if product is None:
        raise NotFoundError("Product not found")
    if result.rowcount == 0:
        raise LowStockViolation(
            f"Insufficient stock for {product.name}. Current: {product.current_stock}, requested change: {delta}"
        )

    current = product.current_stock
    if current < 0:
        logger.warning("Stock of product %s is negative (%d)", product.id, current)
    return current - delta, current
