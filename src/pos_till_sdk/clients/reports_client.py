from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models_reports import InventoryValue, ReportRange, SalesByPaymentMethod, SalesSummary, TopProduct
from .base import BaseClient, _coerce_model, _expect_dict, _expect_list, _params


@dataclass
class ReportsClient(BaseClient):
    def sales_summary(self, report_range: ReportRange | Mapping[str, Any] | None = None) -> SalesSummary:
        data = self._call(
            "GET",
            "reports/sales/summary",
            params=_range_params(report_range),
            module="reports",
            operation="sales_summary",
        )
        return SalesSummary.model_validate(_expect_dict(data, "sales summary"))

    def top_products(self, report_range: ReportRange | Mapping[str, Any] | None = None) -> list[TopProduct]:
        data = self._call(
            "GET",
            "reports/sales/top-products",
            params=_range_params(report_range),
            module="reports",
            operation="top_products",
        )
        return [TopProduct.model_validate(row) for row in _expect_list(data, "top products")]

    def sales_by_payment_method(
        self, report_range: ReportRange | Mapping[str, Any] | None = None
    ) -> list[SalesByPaymentMethod]:
        data = self._call(
            "GET",
            "reports/sales/by-payment-method",
            params=_range_params(report_range),
            module="reports",
            operation="sales_by_payment_method",
        )
        return [SalesByPaymentMethod.model_validate(row) for row in _expect_list(data, "sales by payment method")]

    def inventory_value(self) -> InventoryValue:
        data = self._call("GET", "reports/inventory/value", module="reports", operation="inventory_value")
        return InventoryValue.model_validate(_expect_dict(data, "inventory value"))


def _range_params(report_range: ReportRange | Mapping[str, Any] | None) -> dict[str, Any] | None:
    if report_range is None:
        return None
    resolved = _coerce_model(report_range, ReportRange)
    return _params(**resolved.model_dump(mode="json"))
