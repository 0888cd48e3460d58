from decimal import Decimal, localcontext

from sqlalchemy import func
from sqlalchemy.orm import Session

from cleanstock.config import settings
from cleanstock.models.order import Order, OrderStatus
from cleanstock.models.product import Product
from cleanstock.schemas.sale import CENTS
from cleanstock.services import delivery_service, sale_service


def summary(db: Session) -> dict:
    """Dashboard rollup, computed on every call.

    `total_sales_value` only covers the recent sales window, not all-time sales.
    """
    limit = settings.DASHBOARD_RECENT_LIMIT

    total_products = db.query(func.count(Product.id)).scalar()
    low_stock_count = (
        db.query(func.count(Product.id))
        .filter(Product.current_stock <= Product.min_stock)
        .scalar()
    )
    active_orders = (
        db.query(func.count(Order.id))
        .filter(Order.status != OrderStatus.COMPLETED)
        .scalar()
    )

    recent_sales = sale_service.recent_sales(db, limit)
    recent_deliveries = delivery_service.recent_deliveries(db, limit)
    with localcontext() as ctx:
        # Room for the sum of several totals that each fill the default precision
        ctx.prec = 60
        total_sales_value = sum((Decimal(s.total) for s in recent_sales), Decimal("0")).quantize(CENTS)

    return {
        "total_products": total_products,
        "low_stock_count": low_stock_count,
        "total_sales_value": str(total_sales_value),
        "active_orders": active_orders,
        "recent_sales": recent_sales,
        "recent_deliveries": recent_deliveries,
    }
