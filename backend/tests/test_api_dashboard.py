"""Tests for exchange rate, dashboard and report endpoints."""

from datetime import date
from decimal import Decimal

from serendipia.models.payment_method import Currency
from serendipia.models.transaction import TransactionType


class TestExchangeRateAPI:

    def test_default_rate(self, client):
        response = client.get("/api/v1/exchange-rate")
        assert response.status_code == 200
        assert Decimal(response.json()["rate"]) == Decimal("36.5")

    def test_update_rate(self, client):
        response = client.put("/api/v1/exchange-rate", json={"rate": "40"})
        assert response.status_code == 200
        assert Decimal(client.get("/api/v1/exchange-rate").json()["rate"]) == Decimal("40")

    def test_rate_must_be_positive(self, client):
        assert client.put("/api/v1/exchange-rate", json={"rate": "0"}).status_code == 422
        assert client.put("/api/v1/exchange-rate", json={"rate": "-3"}).status_code == 422


class TestDashboardAPI:
    """Dashboard endpoints call the engine over the owner's snapshot."""

    def test_summary(self, client, sample_transaction, save_txn):
        save_txn("50", TransactionType.income, Currency.USD, parts=[("USDT", "50")])
        save_txn("5", TransactionType.adjustment, Currency.USD, parts=[("EFECTIVO_USD", "5")])

        response = client.get("/api/v1/dashboard/summary")
        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["bs"]["bank_balance"]) == Decimal("-400")
        assert Decimal(data["bs"]["total_balance"]) == Decimal("-400")
        assert Decimal(data["bs"]["period_expenses"]) == Decimal("400")
        assert Decimal(data["usd"]["digital_balance"]) == Decimal("50")
        assert Decimal(data["usd"]["cash_balance"]) == Decimal("5")
        assert Decimal(data["usd"]["period_income"]) == Decimal("50")
        assert data["adjustments_in_period_income"] is False

    def test_summary_period_only_limits_period_totals(self, client, save_txn):
        save_txn("100", TransactionType.income, Currency.USD, day=date(2025, 12, 1), parts=[("USDT", "100")])
        data = client.get("/api/v1/dashboard/summary", params={"period": "month"}).json()
        assert Decimal(data["usd"]["period_income"]) == Decimal("0")
        assert Decimal(data["usd"]["digital_balance"]) == Decimal("100")

    def test_summary_empty(self, client):
        data = client.get("/api/v1/dashboard/summary").json()
        assert Decimal(data["bs"]["total_balance"]) == Decimal("0")
        assert Decimal(data["usd"]["total_balance"]) == Decimal("0")

    def test_summary_requires_owner(self, client):
        response = client.get("/api/v1/dashboard/summary", headers={"X-Owner-Id": ""})
        assert response.status_code == 401

    def test_kpis_use_current_rate(self, client, sample_transaction, save_txn):
        client.put("/api/v1/exchange-rate", json={"rate": "40"})
        save_txn("30", TransactionType.income, Currency.USD, parts=[("USDT", "30")])

        data = client.get("/api/v1/dashboard/kpis", params={"period": "month"}).json()
        assert data["period_income_usd"] == 30.0
        assert data["period_expenses_usd"] == 10.0
        assert data["net_usd"] == 20.0
        assert data["total_balance_usd"] == 20.0
        assert data["exchange_rate"] == 40.0
        assert data["significant_transactions"][0]["amount_usd"] == 30.0

    def test_monthly_flow(self, client, sample_transaction):
        client.put("/api/v1/exchange-rate", json={"rate": "40"})
        points = client.get("/api/v1/dashboard/monthly-flow", params={"months": 6}).json()
        assert len(points) == 6
        assert points[-1]["month"] == "2026-03"
        assert points[-1]["expenses"] == 10.0

    def test_balance_evolution(self, client, sample_transaction):
        client.put("/api/v1/exchange-rate", json={"rate": "40"})
        points = client.get("/api/v1/dashboard/balance-evolution").json()
        assert len(points) == 12
        assert points[-2]["balance"] == 0.0
        assert points[-1]["balance"] == -10.0

    def test_categories(self, client, sample_transaction, save_txn):
        save_txn("100", TransactionType.income, Currency.USD, category="Ventas")
        expenses = client.get("/api/v1/dashboard/categories").json()
        assert [c["category"] for c in expenses] == ["Food"]
        income = client.get("/api/v1/dashboard/categories", params={"kind": "income"}).json()
        assert income[0]["category"] == "Ventas"
        assert income[0]["percent"] == 100.0


class TestReportAPI:

    def test_financial_report(self, client, sample_transaction, save_txn):
        save_txn("1234.5", TransactionType.income, Currency.BS, parts=[("EFECTIVO_BS", "1234.5")], description="Venta")

        response = client.get("/api/v1/reports/financial", params={"period": "month"})
        assert response.status_code == 200
        data = response.json()
        assert "Financial Report" in data["title"]
        assert data["period_label"] == "This month"
        assert len(data["income_and_adjustments"]) == 1
        assert data["income_and_adjustments"][0]["amount"] == "1.234,50 Bs."

        expense = data["expenses"][0]
        assert expense["date"] == "17/03/2026"
        assert expense["category"] == "Food"
        assert expense["amount"] == "-400,00 Bs."
        assert expense["payment_methods"] == "Pago Móvil (400,00)"

    def test_custom_period_label(self, client):
        data = client.get("/api/v1/reports/financial", params={
            "period": "custom", "start_date": "2026-01-01", "end_date": "2026-01-31",
        }).json()
        assert data["period_label"] == "Custom range: 01/01/2026 - 31/01/2026"
        assert data["expenses"] == []
