from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
import responses

from pos_till_sdk.clients.customers_client import CustomersClient
from pos_till_sdk.clients.products_client import ProductsClient
from pos_till_sdk.clients.reports_client import ReportsClient
from pos_till_sdk.exceptions import NotFoundError
from pos_till_sdk.http_client import HttpClient
from pos_till_sdk.models_reports import ReportRange

from tests.conftest import BASE_URL, envelope


@responses.activate
def test_products_list_and_get(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/products",
        json=envelope([{"id": "p1", "name": "Agua", "price": 10, "stock": 4}]),
    )
    responses.add(
        responses.GET,
        f"{BASE_URL}/products/p1",
        json=envelope({"id": "p1", "name": "Agua", "price": 10, "stock": 3}),
    )
    client = ProductsClient(http=http, access_token="tok")

    products = client.list_products()
    product = client.get_product("p1")

    assert products[0].price == Decimal("10")
    assert product.stock == 3
    assert responses.calls[1].request.headers["Authorization"] == "Bearer tok"


@responses.activate
def test_unknown_product_is_not_found(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/products/missing",
        json={"message": "Producto no encontrado"},
        status=404,
    )
    with pytest.raises(NotFoundError):
        ProductsClient(http=http).get_product("missing")


@responses.activate
def test_list_rejects_non_array_payload(http: HttpClient) -> None:
    responses.add(responses.GET, f"{BASE_URL}/products", json=envelope({"id": "p1"}))
    with pytest.raises(ValueError):
        ProductsClient(http=http).list_products()


@responses.activate
def test_customers(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/customers",
        json=envelope([{"id": "c1", "name": "Público en general"}]),
    )
    responses.add(
        responses.GET,
        f"{BASE_URL}/customers/c1",
        json=envelope({"id": "c1", "name": "Público en general", "loyalty_points": 12}),
    )
    responses.add(
        responses.GET,
        f"{BASE_URL}/customers/c1/stats",
        json=envelope({"total_purchases": 3, "total_spent": 450.5, "loyalty_points": 12}),
    )
    client = CustomersClient(http=http)

    assert client.list_customers()[0].id == "c1"
    assert client.get_customer("c1").loyalty_points == 12
    stats = client.get_stats("c1")
    assert stats.total_purchases == 3
    assert stats.total_spent == Decimal("450.5")


@responses.activate
def test_reports_send_date_range(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/reports/sales/summary",
        json=envelope({"total_sales": 1200, "total_transactions": 8, "average_ticket": 150}),
    )
    responses.add(
        responses.GET,
        f"{BASE_URL}/reports/sales/top-products",
        json=envelope([{"product_id": "p1", "product_name": "Agua", "quantity_sold": 30, "times_sold": 9}]),
    )
    responses.add(
        responses.GET,
        f"{BASE_URL}/reports/sales/by-payment-method",
        json=envelope([{"method": "cash", "total": 900, "count": 6}]),
    )
    client = ReportsClient(http=http)
    period = ReportRange(start_date=date(2026, 3, 1), end_date=date(2026, 3, 31))

    summary = client.sales_summary(period)
    top = client.top_products({"start_date": "2026-03-01"})
    by_method = client.sales_by_payment_method()

    assert summary.total_transactions == 8
    assert "start_date=2026-03-01" in responses.calls[0].request.url
    assert "end_date=2026-03-31" in responses.calls[0].request.url
    assert top[0].quantity_sold == Decimal("30")
    assert "end_date" not in responses.calls[1].request.url
    assert by_method[0].method == "cash"
    assert "start_date" not in responses.calls[2].request.url


@responses.activate
def test_inventory_value_report(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/reports/inventory/value",
        json=envelope({"total_products": 40, "total_stock_value": 15230.75, "low_stock_items": 3}),
    )
    value = ReportsClient(http=http).inventory_value()
    assert value.total_stock_value == Decimal("15230.75")
    assert value.out_of_stock_items == 0
