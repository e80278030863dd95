# pharmabill/domain/services/dashboard_service.py
"""Inventory alerts, the month-over-month summary, receivables and per-customer sales."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from pharmabill.domain.models.ledger import Counterparty, LedgerDocument, ProductInfo

ZERO = Decimal("0")
MAX_EXPIRING = 10


@dataclass
class PeriodFigures:
    current: Decimal | int = ZERO
    previous: Decimal | int = ZERO


@dataclass
class MonthSummary:
    month: str  # YYYY-MM
    sales: PeriodFigures = field(default_factory=PeriodFigures)
    purchases: PeriodFigures = field(default_factory=PeriodFigures)
    profit: PeriodFigures = field(default_factory=PeriodFigures)
    invoices: PeriodFigures = field(default_factory=lambda: PeriodFigures(0, 0))

    def to_dict(self) -> dict:
        def pair(p: PeriodFigures) -> dict:
            return {"current": p.current, "previous": p.previous}

        return {
            "month": self.month,
            "sales": pair(self.sales),
            "purchases": pair(self.purchases),
            "profit": pair(self.profit),
            "invoices": pair(self.invoices),
        }


def month_bounds(month: str) -> tuple[date, date]:
    """'2025-02' -> (2025-02-01, 2025-02-28)."""
    year, mon = (int(part) for part in month.split("-"))
    start = date(year, mon, 1)
    next_month = date(year + (mon == 12), mon % 12 + 1, 1)
    return start, next_month - timedelta(days=1)


def previous_month(month: str) -> str:
    start, _ = month_bounds(month)
    prev = start - timedelta(days=1)
    return f"{prev.year:04d}-{prev.month:02d}"


def low_stock(products: list[ProductInfo]) -> list[ProductInfo]:
    return [p for p in products if not p.is_deleted and p.stock < p.reorder_level]


def expiring_products(
    products: list[ProductInfo],
    today: date,
    within_days: int = 30,
) -> list[ProductInfo]:
    """Products expiring after today and within the window, soonest first."""
    horizon = today + timedelta(days=within_days)
    expiring = [
        p for p in products
        if not p.is_deleted and p.expiry_date and today < p.expiry_date <= horizon
    ]
    expiring.sort(key=lambda p: (p.expiry_date, p.name))
    return expiring[:MAX_EXPIRING]


def month_summary(
    invoices: list[LedgerDocument],
    purchases: list[LedgerDocument],
    month: str,
) -> MonthSummary:
    """Sales, purchases, gross profit and invoice count for a month and the one before."""
    current = month_bounds(month)
    previous = month_bounds(previous_month(month))

    def within(doc: LedgerDocument, bounds: tuple[date, date]) -> bool:
        return bounds[0] <= doc.date <= bounds[1]

    def total(docs: list[LedgerDocument], bounds: tuple[date, date]) -> Decimal:
        return sum((d.grand_total for d in docs if within(d, bounds)), ZERO)

    summary = MonthSummary(month=month)
    summary.sales = PeriodFigures(total(invoices, current), total(invoices, previous))
    summary.purchases = PeriodFigures(total(purchases, current), total(purchases, previous))
    summary.profit = PeriodFigures(
        summary.sales.current - summary.purchases.current,
        summary.sales.previous - summary.purchases.previous,
    )
    summary.invoices = PeriodFigures(
        sum(1 for d in invoices if within(d, current)),
        sum(1 for d in invoices if within(d, previous)),
    )
    return summary


@dataclass
class SalesLedgerSummary:
    invoices: int = 0
    total_sales: Decimal = ZERO
    total_received: Decimal = ZERO
    total_pending: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO

    @property
    def total_gst(self) -> Decimal:
        return self.cgst + self.sgst + self.igst

    def to_dict(self) -> dict:
        return {
            "invoices": self.invoices,
            "total_sales": self.total_sales,
            "total_received": self.total_received,
            "total_pending": self.total_pending,
            "gst": {
                "cgst": self.cgst,
                "sgst": self.sgst,
                "igst": self.igst,
                "total": self.total_gst,
            },
        }


def sales_ledger_summary(invoices: list[LedgerDocument]) -> SalesLedgerSummary:
    """Billed, received and outstanding amounts with the GST breakup."""
    summary = SalesLedgerSummary()
    for doc in invoices:
        summary.invoices += 1
        summary.total_sales += doc.grand_total
        summary.total_received += doc.amount_paid
        summary.cgst += doc.total_cgst
        summary.sgst += doc.total_sgst
        summary.igst += doc.total_igst
    summary.total_pending = summary.total_sales - summary.total_received
    return summary


@dataclass
class CustomerSales:
    customer_id: str
    name: str
    phone: str | None = None
    invoices: int = 0
    total_purchases: Decimal = ZERO
    last_purchase: date | None = None  # None: never bought

    def to_dict(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "name": self.name,
            "phone": self.phone,
            "invoices": self.invoices,
            "total_purchases": self.total_purchases,
            "last_purchase": self.last_purchase,
        }


def customer_report(
    customers: list[Counterparty],
    invoices: list[LedgerDocument],
) -> list[CustomerSales]:
    """Per-customer invoice count, amount billed and last invoice date, by name."""
    rows = {c.id: CustomerSales(customer_id=c.id, name=c.name, phone=c.phone) for c in customers}
    for doc in invoices:
        party = doc.counterparty
        if party is None:
            continue
        row = rows.get(party.id)
        if row is None:
            # Invoices of since-deleted customers still count.
            row = rows[party.id] = CustomerSales(customer_id=party.id, name=party.name, phone=party.phone)
        row.invoices += 1
        row.total_purchases += doc.grand_total
        if row.last_purchase is None or doc.date > row.last_purchase:
            row.last_purchase = doc.date
    return sorted(rows.values(), key=lambda r: (r.name.lower(), r.customer_id))
