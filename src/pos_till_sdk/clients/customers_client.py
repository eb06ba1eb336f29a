from __future__ import annotations

from dataclasses import dataclass

from ..models import Customer, CustomerStats
from .base import BaseClient, _expect_dict, _expect_list


@dataclass
class CustomersClient(BaseClient):
    def list_customers(self) -> list[Customer]:
        data = self._call("GET", "customers", module="customers", operation="list")
        return [Customer.model_validate(row) for row in _expect_list(data, "customers")]

    def get_customer(self, customer_id: str) -> Customer:
        data = self._call("GET", f"customers/{customer_id}", module="customers", operation="get")
        return Customer.model_validate(_expect_dict(data, "customer"))

    def get_stats(self, customer_id: str) -> CustomerStats:
        data = self._call("GET", f"customers/{customer_id}/stats", module="customers", operation="stats")
        return CustomerStats.model_validate(_expect_dict(data, "customer stats"))
