"""Tests for the GSTR-1 report classifier."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from conftest import make_invoice, make_line

from pharmabill.domain.models.diagnostics import DiagnosticKind
from pharmabill.domain.models.ledger import Counterparty
from pharmabill.domain.services.gst_report import build_gst_report, classify

B2C_LOCAL = Counterparty(id="c1", name="Walk-in", type="B2C", state_code="27")
B2C_LOCAL_OTHER = Counterparty(id="c6", name="Sunita Jadhav", type="B2C", state_code="27")
B2CL_KARNATAKA = Counterparty(id="c2", name="Traveller", type="B2CL", state_code="29")
B2B_GUJARAT = Counterparty(
    id="c3", name="Shah Medicals", type="B2B", gstin="24AAACS1234F1Z5", state_code="24"
)


class TestB2csAggregation:
    def test_same_state_and_rate_fold_into_one_row(self):
        docs = [
            make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 18, 1000)]),
            make_invoice("INV-000002", B2C_LOCAL, [make_line("3004", 18, 500)]),
        ]
        report = classify(docs)

        assert len(report.b2cs) == 1
        row = report.b2cs[0]
        assert row.state_code == "27"
        assert row.gst_rate == Decimal("18")
        assert row.taxable_value == Decimal("1500")
        assert row.cgst == Decimal("135")
        assert report.b2b == [] and report.b2cl == []

    def test_different_customers_same_state_fold_together(self):
        docs = [
            make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 18, 1000)]),
            make_invoice("INV-000002", B2C_LOCAL_OTHER, [make_line("3004", 18, 500)]),
        ]
        report = classify(docs)

        assert len(report.b2cs) == 1
        row = report.b2cs[0]
        assert (row.state_code, row.gst_rate) == ("27", Decimal("18"))
        assert row.taxable_value == Decimal("1500")
        assert row.cgst == row.sgst == Decimal("135")

    def test_rates_split_into_separate_rows(self):
        doc = make_invoice(
            "INV-000001",
            B2C_LOCAL,
            [make_line("3004", 12, 100), make_line("3005", 18, 200)],
        )
        report = classify([doc])
        assert [r.gst_rate for r in report.b2cs] == [Decimal("12"), Decimal("18")]
        assert report.summary.counts.b2cs == 2

    def test_single_digit_state_code_normalized(self):
        delhi = Counterparty(id="c9", name="Delhi walk-in", type="b2c", state_code="7")
        report = classify([make_invoice("INV-000001", delhi, [make_line("3004", 5, 100, inter_state=True)])])
        assert report.b2cs[0].state_code == "07"

    def test_document_without_items_uses_effective_rate(self):
        doc = make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 12, 100)])
        doc = doc.model_copy(update={"items": []})
        report = classify([doc])
        assert report.b2cs[0].gst_rate == Decimal("12")
        assert report.b2cs[0].taxable_value == Decimal("100")


class TestInvoiceLevelBuckets:
    def test_b2b_row_carries_gstin(self):
        doc = make_invoice("INV-000010", B2B_GUJARAT, [make_line("3004", 12, 1000, inter_state=True)])
        report = classify([doc])

        assert len(report.b2b) == 1
        row = report.b2b[0]
        assert row.gstin == "24AAACS1234F1Z5"
        assert row.igst == Decimal("120")
        assert row.total == Decimal("1120")
        assert report.summary.totals.b2b == Decimal("1120")

    def test_b2cl_row(self):
        doc = make_invoice("INV-000011", B2CL_KARNATAKA, [make_line("3004", 12, 300000, inter_state=True)])
        report = classify([doc])
        assert len(report.b2cl) == 1
        assert report.b2cl[0].state_code == "29"
        assert report.b2cl[0].igst == Decimal("36000")

    def test_buckets_are_exclusive(self):
        docs = [
            make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 12, 100)]),
            make_invoice("INV-000002", B2CL_KARNATAKA, [make_line("3004", 12, 100, inter_state=True)]),
            make_invoice("INV-000003", B2B_GUJARAT, [make_line("3004", 12, 100, inter_state=True)]),
        ]
        report = classify(docs)
        counts = report.summary.counts
        assert (counts.b2b, counts.b2cl, counts.b2cs) == (1, 1, 1)

    def test_summary_igst_includes_every_bucket(self):
        docs = [
            make_invoice("INV-000001", B2CL_KARNATAKA, [make_line("3004", 12, 100, inter_state=True)]),
            make_invoice("INV-000002", B2B_GUJARAT, [make_line("3004", 12, 100, inter_state=True)]),
        ]
        assert classify(docs).summary.gst.igst == Decimal("24")


class TestHsnSummary:
    def test_hsn_spans_all_buckets(self):
        docs = [
            make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 12, 100, quantity=2)]),
            make_invoice("INV-000002", B2B_GUJARAT, [make_line("3004", 12, 50, inter_state=True, quantity=1)]),
        ]
        report = classify(docs)
        assert len(report.hsn) == 1
        row = report.hsn[0]
        assert row.quantity == Decimal("3")
        assert row.taxable_value == Decimal("150")
        assert row.cgst == Decimal("6")
        assert row.igst == Decimal("6")

    def test_rate_mismatch_keeps_first_and_reports(self):
        docs = [
            make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 12, 100)], on=date(2025, 1, 1)),
            make_invoice("INV-000002", B2C_LOCAL, [make_line("3004", 5, 100)], on=date(2025, 1, 2)),
        ]
        report = classify(docs)
        assert report.hsn[0].gst_rate == Decimal("12")
        assert report.hsn[0].taxable_value == Decimal("200")
        assert any("more than one GST rate" in d.message for d in report.diagnostics)

    def test_blank_hsn_reported(self):
        report = classify([make_invoice("INV-000001", B2C_LOCAL, [make_line("", 12, 100)])])
        assert report.hsn[0].hsn_code == ""
        assert report.diagnostics[0].kind is DiagnosticKind.DATA_INTEGRITY


class TestClassifierBehaviour:
    def test_empty_input(self):
        report = classify([])
        assert report.b2b == report.b2cl == report.b2cs == report.hsn == []
        assert report.summary.totals.b2cs == Decimal("0")
        assert report.diagnostics == []

    def test_invalid_classification_excluded(self):
        odd = Counterparty(id="c5", name="Legacy", type="RETAIL", state_code="27")
        docs = [
            make_invoice("INV-000001", odd, [make_line("3004", 12, 100)]),
            make_invoice("INV-000002", None, [make_line("3004", 12, 100)]),
        ]
        report = classify(docs)
        assert report.b2cs == [] and report.hsn == []
        assert len(report.diagnostics) == 2

    def test_idempotent(self):
        docs = [
            make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 18, 1000)]),
            make_invoice("INV-000002", B2B_GUJARAT, [make_line("3005", 12, 10, inter_state=True)]),
        ]
        assert classify(docs) == classify(docs)

    def test_input_order_does_not_matter(self):
        docs = [
            make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 12, 100, name="Crocin")], on=date(2025, 1, 1)),
            make_invoice("INV-000002", B2B_GUJARAT, [make_line("3004", 12, 10, inter_state=True, name="Dolo")], on=date(2025, 1, 2)),
            make_invoice("INV-000003", B2C_LOCAL, [make_line("3005", 18, 10)], on=date(2025, 1, 3)),
        ]
        assert classify(docs) == classify(list(reversed(docs)))
        assert classify(docs).hsn[0].description == "Crocin"


class TestBuildGstReport:
    def test_reads_period_from_repository(self, event_loop):
        repo = MagicMock()
        repo.list_for_period = AsyncMock(
            return_value=[make_invoice("INV-000001", B2C_LOCAL, [make_line("3004", 12, 100)])]
        )

        report = event_loop.run_until_complete(
            build_gst_report(repo, date(2025, 1, 1), date(2025, 1, 31))
        )

        repo.list_for_period.assert_awaited_once_with(date(2025, 1, 1), date(2025, 1, 31))
        assert report.period_start == date(2025, 1, 1)
        assert report.period_end == date(2025, 1, 31)
        assert report.summary.counts.b2cs == 1
