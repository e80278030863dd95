# pharmabill/domain/services/line_items.py
"""
Line items of a document being composed, and their document-level totals.

Every derived figure is recomputed from (quantity, price, discount, gst_rate)
whenever one of them changes and rounded half-up to the four decimals the
ledger stores. Totals are plain sums of those stored line fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from pharmabill.domain.models.ledger import ProductInfo
from pharmabill.domain.services.gst_calculator import (
    HUNDRED,
    ZERO,
    compute_gst,
    to_decimal,
)

STORE_PLACES = Decimal("0.0001")  # Numeric(14, 4) columns


def _stored(value: Decimal) -> Decimal:
    return value.quantize(STORE_PLACES, rounding=ROUND_HALF_UP)


_INPUT_FIELDS = ("quantity", "price", "discount", "gst_rate")
_DESCRIPTIVE_FIELDS = (
    "product_id",
    "product_name",
    "hsn_code",
    "batch_number",
    "expiry_date",
    "unit",
)


@dataclass
class LineItem:
    product_id: str = ""
    product_name: str = ""
    hsn_code: str = ""
    batch_number: str | None = None
    expiry_date: date | None = None
    unit: str | None = None
    quantity: Decimal = Decimal("1")
    price: Decimal = ZERO
    discount: Decimal = ZERO  # percent, 0-100
    gst_rate: Decimal = ZERO  # percent

    # Derived
    taxable_value: Decimal = field(default=ZERO, init=False)
    cgst: Decimal = field(default=ZERO, init=False)
    sgst: Decimal = field(default=ZERO, init=False)
    igst: Decimal = field(default=ZERO, init=False)
    total: Decimal = field(default=ZERO, init=False)

    def __post_init__(self) -> None:
        for name in _INPUT_FIELDS:
            setattr(self, name, to_decimal(getattr(self, name)))

    @property
    def gross_amount(self) -> Decimal:
        return _stored(self.quantity * self.price)

    @property
    def discount_amount(self) -> Decimal:
        return _stored(self.gross_amount * self.discount / HUNDRED)

    def recompute(self, is_inter_state: bool) -> "LineItem":
        self.taxable_value = self.gross_amount - self.discount_amount
        split = compute_gst(self.taxable_value, self.gst_rate, is_inter_state)
        self.cgst = _stored(split.cgst)
        self.sgst = _stored(split.sgst)
        self.igst = _stored(split.igst)
        self.total = self.taxable_value + self.cgst + self.sgst + self.igst
        return self

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class DocumentTotals:
    subtotal: Decimal = ZERO
    total_discount: Decimal = ZERO
    total_taxable_value: Decimal = ZERO
    total_cgst: Decimal = ZERO
    total_sgst: Decimal = ZERO
    total_igst: Decimal = ZERO
    grand_total: Decimal = ZERO

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def compute_totals(lines) -> DocumentTotals:
    """Fold already-recomputed lines into document totals."""
    totals = DocumentTotals()
    for line in lines:
        totals.subtotal += line.gross_amount
        totals.total_discount += line.discount_amount
        totals.total_taxable_value += line.taxable_value
        totals.total_cgst += line.cgst
        totals.total_sgst += line.sgst
        totals.total_igst += line.igst
        totals.grand_total += line.total
    return totals


class LineItemAggregator:
    """In-memory line collection for one document being drafted."""

    def __init__(
        self,
        is_inter_state: bool = False,
        lines: list[LineItem] | None = None,
        *,
        use_purchase_price: bool = False,
    ) -> None:
        self.is_inter_state = is_inter_state
        self.use_purchase_price = use_purchase_price
        self.lines: list[LineItem] = []
        for line in lines or []:
            self.lines.append(line.recompute(is_inter_state))

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def add_line(self, **values) -> LineItem:
        line = LineItem(**values).recompute(self.is_inter_state)
        self.lines.append(line)
        return line

    def update_line(self, index: int, **changes) -> LineItem:
        line = self.lines[index]
        for name, value in changes.items():
            if name in _INPUT_FIELDS:
                value = to_decimal(value)
            elif name not in _DESCRIPTIVE_FIELDS:
                raise AttributeError(f"LineItem has no editable field '{name}'")
            setattr(line, name, value)
        return line.recompute(self.is_inter_state)

    def apply_product(self, index: int, product: ProductInfo) -> LineItem:
        """Fill a row from the product master: descriptive fields, price and rate."""
        price = product.purchase_price if self.use_purchase_price else product.selling_price
        return self.update_line(
            index,
            product_id=product.id,
            product_name=product.name,
            hsn_code=product.hsn_code,
            batch_number=product.batch_number,
            unit=product.unit,
            price=price,
            gst_rate=product.gst_rate,
        )

    def remove_line(self, index: int) -> LineItem:
        return self.lines.pop(index)

    def set_jurisdiction(self, is_inter_state: bool) -> None:
        self.is_inter_state = is_inter_state
        for line in self.lines:
            line.recompute(is_inter_state)

    def compute_totals(self) -> DocumentTotals:
        return compute_totals(self.lines)
