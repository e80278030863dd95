"""HTTP-level tests for the v1 API (repositories and services mocked)."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from pharmabill.core.db import get_db
from pharmabill.domain.errors import ValidationError
from pharmabill.domain.models.diagnostics import number_fallback
from pharmabill.domain.models.gst_report import GstReport
from pharmabill.domain.models.ledger import Counterparty, LedgerDocument
from pharmabill.domain.services.document_ledger import LedgerResult
from pharmabill.main import app


async def _fake_db():
    yield MagicMock()


app.dependency_overrides[get_db] = _fake_db
# No context manager: startup (create_all) is not run.
client = TestClient(app)


def test_health():
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


class TestProducts:
    def test_list_paginated(self, paracetamol):
        repo = MagicMock()
        repo.list = AsyncMock(return_value=([paracetamol], 1))
        with patch("pharmabill.api.v1.routes.products.ProductRepository", return_value=repo):
            resp = client.get("/api/v1/products?limit=10")

        body = resp.json()
        assert resp.status_code == 200
        assert body["data"]["total"] == 1
        assert body["data"]["has_more"] is False
        assert body["data"]["items"][0]["name"] == "Paracetamol 500mg"

    def test_missing_product_404(self):
        repo = MagicMock()
        repo.get = AsyncMock(return_value=None)
        with patch("pharmabill.api.v1.routes.products.ProductRepository", return_value=repo):
            resp = client.get("/api/v1/products/nope")
        assert resp.status_code == 404

    def test_negative_price_rejected(self):
        resp = client.post("/api/v1/products", json={"name": "X", "selling_price": -1})
        assert resp.status_code == 422


class TestCustomers:
    def test_create_fills_state_name(self):
        repo = MagicMock()
        repo.create = AsyncMock(
            side_effect=lambda **values: Counterparty(id="c1", **values)
        )
        with patch(
            "pharmabill.api.v1.routes.counterparties.CounterpartyRepository",
            return_value=repo,
        ):
            resp = client.post(
                "/api/v1/customers",
                json={"name": "Ramesh", "state_code": "7", "type": "B2C"},
            )

        assert resp.status_code == 201
        customer = resp.json()["data"]["customer"]
        assert customer["state_code"] == "07"
        assert customer["state"] == "Delhi"

    def test_b2b_without_gstin_is_422(self):
        resp = client.post(
            "/api/v1/customers",
            json={"name": "Shah Medicals", "state_code": "24", "type": "B2B"},
        )
        assert resp.status_code == 422
        assert "GSTIN" in resp.json()["message"]


class TestInvoices:
    def test_create_returns_document_and_diagnostics(self):
        result = LedgerResult(
            document=LedgerDocument(id="d1", number="INV-1736899200000", date=date(2025, 1, 15), grand_total=Decimal("218.8")),
            diagnostics=[number_fallback("Latest document number could not be parsed")],
        )
        mocked = AsyncMock(return_value=result)
        with patch("pharmabill.api.v1.routes.documents.create_document", mocked):
            resp = client.post(
                "/api/v1/invoices",
                json={
                    "counterparty_id": "c1",
                    "date": "2025-01-15",
                    "items": [{"product_id": "p1", "quantity": 2, "discount": 10}],
                },
            )

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["document"]["number"] == "INV-1736899200000"
        assert Decimal(str(data["document"]["grand_total"])) == Decimal("218.8")
        assert data["diagnostics"][0]["kind"] == "NumberGenerationFallback"

        kind, draft = mocked.await_args.args
        assert kind.value == "invoice"
        assert draft.lines[0].quantity == Decimal("2")
        assert mocked.await_args.kwargs["prefix"] == "INV-"

    def test_purchase_uses_purchase_prefix(self):
        mocked = AsyncMock(
            return_value=LedgerResult(document=LedgerDocument(number="PUR-000001", date=date(2025, 1, 15)))
        )
        with patch("pharmabill.api.v1.routes.documents.create_document", mocked):
            resp = client.post(
                "/api/v1/purchases",
                json={"counterparty_id": "s1", "date": "2025-01-15", "items": [{"product_id": "p1"}]},
            )
        assert resp.status_code == 201
        assert mocked.await_args.kwargs["prefix"] == "PUR-"

    def test_ledger_validation_error_is_422_envelope(self):
        mocked = AsyncMock(side_effect=ValidationError("Please add at least one item"))
        with patch("pharmabill.api.v1.routes.documents.create_document", mocked):
            resp = client.post("/api/v1/invoices", json={"counterparty_id": "c1", "date": "2025-01-15"})

        assert resp.status_code == 422
        assert resp.json() == {
            "status": "error",
            "data": None,
            "message": "Please add at least one item",
            "errors": None,
        }

    def test_discount_over_hundred_rejected(self):
        resp = client.post(
            "/api/v1/invoices",
            json={"counterparty_id": "c1", "date": "2025-01-15", "items": [{"product_id": "p1", "discount": 150}]},
        )
        assert resp.status_code == 422


class TestReports:
    def test_gst_report_for_period(self):
        mocked = AsyncMock(return_value=GstReport(period_start=date(2025, 1, 1), period_end=date(2025, 1, 31)))
        with patch("pharmabill.api.v1.routes.gst_reports.build_gst_report", mocked):
            resp = client.get("/api/v1/gst/reports?date_from=2025-01-01&date_to=2025-01-31")

        assert resp.status_code == 200
        assert resp.json()["data"]["period_start"] == "2025-01-01"
        _, start, end = mocked.await_args.args
        assert (start, end) == (date(2025, 1, 1), date(2025, 1, 31))

    def test_inverted_period_rejected(self):
        resp = client.get("/api/v1/gst/reports?date_from=2025-02-01&date_to=2025-01-31")
        assert resp.status_code == 422

    def test_dashboard_month_format(self):
        resp = client.get("/api/v1/dashboard?month=2025-13")
        assert resp.status_code == 422

    def test_customer_report(self, local_customer, gujarat_customer):
        parties = MagicMock()
        parties.list_active = AsyncMock(return_value=[local_customer, gujarat_customer])
        docs = MagicMock()
        docs.list_for_period = AsyncMock(
            return_value=[
                LedgerDocument(
                    number="INV-000001",
                    date=date(2025, 2, 20),
                    counterparty=local_customer,
                    grand_total=Decimal("250"),
                )
            ]
        )
        with patch("pharmabill.api.v1.routes.dashboard.CounterpartyRepository") as repo_cls, patch(
            "pharmabill.api.v1.routes.dashboard.DocumentRepository", return_value=docs
        ):
            repo_cls.customers.return_value = parties
            resp = client.get("/api/v1/dashboard/customers")

        assert resp.status_code == 200
        rows = {r["customer_id"]: r for r in resp.json()["data"]}
        assert rows["c-local"]["invoices"] == 1
        assert rows["c-local"]["last_purchase"] == "2025-02-20"
        assert rows["c-guj"]["invoices"] == 0
        assert rows["c-guj"]["last_purchase"] is None

    def test_sales_ledger_rejects_inverted_range(self):
        resp = client.get("/api/v1/dashboard/sales?date_from=2025-02-01&date_to=2025-01-31")
        assert resp.status_code == 422
