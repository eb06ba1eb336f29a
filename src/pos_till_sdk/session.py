from __future__ import annotations

from dataclasses import dataclass, field

from .clients.customers_client import CustomersClient
from .clients.inventory_client import InventoryClient
from .clients.products_client import ProductsClient
from .clients.reports_client import ReportsClient
from .clients.sales_client import SalesClient
from .clients.shifts_client import ShiftsClient
from .config import ClientConfig
from .http_client import HttpClient
from .models import Operator
from .shift_store import ShiftStore
from .tracing import TraceContext


@dataclass
class ApiSession:
    """Authenticated connection to the backend for one operator.

    The access token comes from the external sign-in flow. All clients built
    here share one ``HttpClient`` so navigation cancellation applies to them
    together.
    """

    config: ClientConfig
    trace: TraceContext | None = None
    token: str | None = None
    operator: Operator | None = None
    shift_store: ShiftStore | None = None
    http: HttpClient | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.trace = self.trace or TraceContext()
        if self.shift_store is None:
            self.shift_store = ShiftStore(enabled=self.config.persistence.shift)
        if self.http is None:
            self.http = HttpClient(config=self.config, trace=self.trace)

    @property
    def operator_id(self) -> str | None:
        return self.operator.id if self.operator else None

    def products_client(self) -> ProductsClient:
        return ProductsClient(http=self.http, access_token=self.token)

    def sales_client(self) -> SalesClient:
        return SalesClient(http=self.http, access_token=self.token)

    def shifts_client(self) -> ShiftsClient:
        return ShiftsClient(http=self.http, access_token=self.token)

    def inventory_client(self) -> InventoryClient:
        return InventoryClient(http=self.http, access_token=self.token)

    def customers_client(self) -> CustomersClient:
        return CustomersClient(http=self.http, access_token=self.token)

    def reports_client(self) -> ReportsClient:
        return ReportsClient(http=self.http, access_token=self.token)

    def establish(self, token: str, operator: Operator) -> None:
        self.token = token
        self.operator = operator

    def clear(self) -> None:
        self.token = None
        self.operator = None
        if self.shift_store:
            self.shift_store.clear()
