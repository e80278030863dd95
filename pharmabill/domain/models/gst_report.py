# pharmabill/domain/models/gst_report.py
"""GSTR-1 report shapes produced by the report classifier."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from pharmabill.domain.models.diagnostics import Diagnostic

ZERO = Decimal("0")


class B2bRow(BaseModel):
    document_number: str
    date: date
    customer_name: str
    gstin: str | None = None
    state_code: str | None = None
    taxable_value: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    total: Decimal = ZERO


class B2clRow(BaseModel):
    document_number: str
    date: date
    state_code: str | None = None  # recipient name/GSTIN are not reported for B2CL
    taxable_value: Decimal = ZERO
    igst: Decimal = ZERO
    total: Decimal = ZERO


class B2csRow(BaseModel):
    state_code: str | None = None
    gst_rate: Decimal = ZERO
    taxable_value: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    total: Decimal = ZERO


class HsnRow(BaseModel):
    hsn_code: str
    description: str = ""
    unit: str | None = None
    quantity: Decimal = ZERO
    gst_rate: Decimal = ZERO
    taxable_value: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    total: Decimal = ZERO


class BucketTotals(BaseModel):
    b2b: Decimal = ZERO
    b2cl: Decimal = ZERO
    b2cs: Decimal = ZERO


class BucketCounts(BaseModel):
    b2b: int = 0
    b2cl: int = 0
    b2cs: int = 0


class TaxTotals(BaseModel):
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO


class ReportSummary(BaseModel):
    totals: BucketTotals = Field(default_factory=BucketTotals)
    counts: BucketCounts = Field(default_factory=BucketCounts)
    gst: TaxTotals = Field(default_factory=TaxTotals)


class GstReport(BaseModel):
    period_start: date | None = None
    period_end: date | None = None
    b2b: list[B2bRow] = Field(default_factory=list)
    b2cl: list[B2clRow] = Field(default_factory=list)
    b2cs: list[B2csRow] = Field(default_factory=list)
    hsn: list[HsnRow] = Field(default_factory=list)
    summary: ReportSummary = Field(default_factory=ReportSummary)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
