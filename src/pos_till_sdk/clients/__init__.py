from .base import BaseClient
from .customers_client import CustomersClient
from .inventory_client import InventoryClient
from .products_client import ProductsClient
from .reports_client import ReportsClient
from .sales_client import SalesClient
from .shifts_client import ShiftsClient

__all__ = [
    "BaseClient",
    "CustomersClient",
    "InventoryClient",
    "ProductsClient",
    "ReportsClient",
    "SalesClient",
    "ShiftsClient",
]
