# pharmabill/domain/services/gst_report.py
"""
GSTR-1 outward-supply report from saved invoices.

Buckets (by the customer's classification):
- B2B  : one row per invoice, with the recipient's GSTIN.
- B2CL : one row per invoice, recipient identified only by state.
- B2CS : folded per (state code, GST rate).
- HSN  : every line of every classified invoice, folded per HSN code.

classify() is a pure projection: the same documents always give the same
report, whatever order they arrive in.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from pharmabill.domain.models.diagnostics import Diagnostic, data_integrity, log_diagnostics
from pharmabill.domain.models.gst_report import (
    B2bRow,
    B2clRow,
    B2csRow,
    GstReport,
    HsnRow,
    ReportSummary,
)
from pharmabill.domain.models.ledger import CounterpartyType, LedgerDocument
from pharmabill.domain.services.gst_calculator import HUNDRED, ZERO, normalize_state_code

logger = logging.getLogger("gst_report")

_RATE_PLACES = Decimal("0.01")


def _rate_key(rate) -> Decimal:
    return Decimal(str(rate or 0)).quantize(_RATE_PLACES)


def _effective_rate(doc: LedgerDocument) -> Decimal:
    """Rate inferred from document totals, for invoices stored without items."""
    taxable = doc.total_taxable_value
    tax = doc.total_cgst + doc.total_sgst + doc.total_igst
    if taxable <= ZERO or tax <= ZERO:
        return ZERO
    return _rate_key(tax * HUNDRED / taxable)


def _b2cs_slices(doc: LedgerDocument) -> list[tuple[Decimal, dict[str, Decimal]]]:
    """Split one invoice into per-rate amounts."""
    if not doc.items:
        return [(
            _effective_rate(doc),
            {
                "taxable_value": doc.total_taxable_value,
                "cgst": doc.total_cgst,
                "sgst": doc.total_sgst,
                "igst": doc.total_igst,
                "total": doc.grand_total,
            },
        )]

    by_rate: dict[Decimal, dict[str, Decimal]] = {}
    for item in doc.items:
        amounts = by_rate.setdefault(
            _rate_key(item.gst_rate),
            {"taxable_value": ZERO, "cgst": ZERO, "sgst": ZERO, "igst": ZERO, "total": ZERO},
        )
        amounts["taxable_value"] += item.taxable_value
        amounts["cgst"] += item.cgst
        amounts["sgst"] += item.sgst
        amounts["igst"] += item.igst
        amounts["total"] += item.total
    return list(by_rate.items())


def classify(documents: Iterable[LedgerDocument]) -> GstReport:
    diagnostics: list[Diagnostic] = []
    b2b: list[B2bRow] = []
    b2cl: list[B2clRow] = []
    b2cs_index: dict[tuple[str, Decimal], B2csRow] = {}
    hsn_index: dict[str, HsnRow] = {}

    # "First seen" (HSN description, rate) means earliest invoice.
    for doc in sorted(documents, key=lambda d: (d.date, d.number)):
        party = doc.counterparty
        classification = party.classification if party else None
        if classification is None:
            diagnostics.append(
                data_integrity(
                    "Invoice skipped: customer classification missing or invalid",
                    document_number=doc.number,
                    classification=party.type if party else None,
                )
            )
            continue

        state_code = normalize_state_code(party.state_code)

        if classification is CounterpartyType.B2B:
            b2b.append(
                B2bRow(
                    document_number=doc.number,
                    date=doc.date,
                    customer_name=party.name,
                    gstin=party.gstin,
                    state_code=state_code,
                    taxable_value=doc.total_taxable_value,
                    cgst=doc.total_cgst,
                    sgst=doc.total_sgst,
                    igst=doc.total_igst,
                    total=doc.grand_total,
                )
            )
        elif classification is CounterpartyType.B2CL:
            b2cl.append(
                B2clRow(
                    document_number=doc.number,
                    date=doc.date,
                    state_code=state_code,
                    taxable_value=doc.total_taxable_value,
                    igst=doc.total_igst,
                    total=doc.grand_total,
                )
            )
        else:
            for rate, amounts in _b2cs_slices(doc):
                key = (state_code or "", rate)
                row = b2cs_index.get(key)
                if row is None:
                    row = b2cs_index[key] = B2csRow(state_code=state_code, gst_rate=rate)
                row.taxable_value += amounts["taxable_value"]
                row.cgst += amounts["cgst"]
                row.sgst += amounts["sgst"]
                row.igst += amounts["igst"]
                row.total += amounts["total"]

        for item in doc.items:
            code = (item.hsn_code or "").strip()
            rate = _rate_key(item.gst_rate)
            row = hsn_index.get(code)
            if row is None:
                if not code:
                    diagnostics.append(
                        data_integrity(
                            "Line without HSN code grouped under a blank code",
                            document_number=doc.number,
                            product_name=item.product_name,
                        )
                    )
                row = hsn_index[code] = HsnRow(
                    hsn_code=code,
                    description=item.product_name,
                    unit=item.unit,
                    gst_rate=rate,
                )
            elif row.gst_rate != rate:
                diagnostics.append(
                    data_integrity(
                        "HSN code used with more than one GST rate; first rate kept",
                        hsn_code=code,
                        reported_rate=str(row.gst_rate),
                        line_rate=str(rate),
                        document_number=doc.number,
                    )
                )
            row.quantity += item.quantity
            row.taxable_value += item.taxable_value
            row.cgst += item.cgst
            row.sgst += item.sgst
            row.igst += item.igst
            row.total += item.total

    b2cs = [b2cs_index[k] for k in sorted(b2cs_index)]
    hsn = [hsn_index[k] for k in sorted(hsn_index)]

    return GstReport(
        b2b=b2b,
        b2cl=b2cl,
        b2cs=b2cs,
        hsn=hsn,
        summary=_summarize(b2b, b2cl, b2cs),
        diagnostics=diagnostics,
    )


def _summarize(b2b: list[B2bRow], b2cl: list[B2clRow], b2cs: list[B2csRow]) -> ReportSummary:
    summary = ReportSummary()
    summary.totals.b2b = sum((r.total for r in b2b), ZERO)
    summary.totals.b2cl = sum((r.total for r in b2cl), ZERO)
    summary.totals.b2cs = sum((r.total for r in b2cs), ZERO)
    summary.counts.b2b = len(b2b)
    summary.counts.b2cl = len(b2cl)
    summary.counts.b2cs = len(b2cs)
    summary.gst.cgst = sum((r.cgst for r in b2b), ZERO) + sum((r.cgst for r in b2cs), ZERO)
    summary.gst.sgst = sum((r.sgst for r in b2b), ZERO) + sum((r.sgst for r in b2cs), ZERO)
    summary.gst.igst = (
        sum((r.igst for r in b2b), ZERO)
        + sum((r.igst for r in b2cl), ZERO)
        + sum((r.igst for r in b2cs), ZERO)
    )
    return summary


async def build_gst_report(repo: Any, start: date, end: date) -> GstReport:
    """Classify every invoice dated within [start, end]."""
    invoices = await repo.list_for_period(start, end)
    report = classify(invoices)
    report.period_start = start
    report.period_end = end
    log_diagnostics(logger, report.diagnostics)
    logger.info(
        "GST report %s..%s: b2b=%d b2cl=%d b2cs=%d hsn=%d",
        start, end, len(report.b2b), len(report.b2cl), len(report.b2cs), len(report.hsn),
    )
    return report
