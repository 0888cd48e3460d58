from pydantic import BaseModel

from cleanstock.schemas.delivery import DeliveryOut
from cleanstock.schemas.sale import SaleOut


class DashboardOut(BaseModel):
    total_products: int
    low_stock_count: int
    total_sales_value: str  # sum over recent_sales only
    active_orders: int
    recent_sales: list[SaleOut]
    recent_deliveries: list[DeliveryOut]
