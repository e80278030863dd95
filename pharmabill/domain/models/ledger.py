from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

ZERO = Decimal("0")


class CounterpartyType(str, Enum):
    B2B = "B2B"
    B2C = "B2C"
    B2CL = "B2CL"


class PaymentMode(str, Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    CREDIT = "credit"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PARTIAL = "partial"
    UNPAID = "unpaid"


class DocumentKind(str, Enum):
    INVOICE = "invoice"
    PURCHASE = "purchase"


class Counterparty(BaseModel):
    """Customer or supplier as seen by the ledger.

    ``type`` is kept as a plain string so that rows with a malformed
    classification can still be loaded and reported on.
    """

    id: str
    name: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    gstin: Optional[str] = None
    type: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[str] = None
    is_deleted: bool = False

    @property
    def classification(self) -> CounterpartyType | None:
        if not self.type:
            return None
        try:
            return CounterpartyType(self.type.strip().upper())
        except ValueError:
            return None


class ProductInfo(BaseModel):
    id: str
    name: str = ""
    hsn_code: str = ""
    batch_number: Optional[str] = None
    manufacturer: Optional[str] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    expiry_date: Optional[date] = None
    purchase_price: Decimal = ZERO
    selling_price: Decimal = ZERO
    gst_rate: Decimal = ZERO
    stock: int = 0
    reorder_level: int = 0
    is_deleted: bool = False


class LineDraft(BaseModel):
    """One row as entered on the invoice/purchase form.

    ``price`` and ``gst_rate`` fall back to the product's defaults when
    omitted.
    """

    product_id: str
    quantity: Decimal = Decimal("1")
    price: Optional[Decimal] = None
    discount: Decimal = ZERO
    gst_rate: Optional[Decimal] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None


class DocumentDraft(BaseModel):
    counterparty_id: str = ""
    date: date
    payment_mode: PaymentMode = PaymentMode.CASH
    payment_status: Optional[PaymentStatus] = None
    amount_paid: Decimal = ZERO
    notes: str = ""
    lines: list[LineDraft] = Field(default_factory=list)


class DocumentLine(BaseModel):
    """Persisted line item, flat."""

    id: Optional[str] = None
    product_id: Optional[str] = None
    product_name: str = ""
    hsn_code: str = ""
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    unit: Optional[str] = None
    quantity: Decimal = ZERO
    price: Decimal = ZERO
    discount: Decimal = ZERO
    taxable_value: Decimal = ZERO
    gst_rate: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    total: Decimal = ZERO


class LedgerDocument(BaseModel):
    """Persisted invoice or purchase with its counterparty snapshot."""

    id: Optional[str] = None
    kind: DocumentKind = DocumentKind.INVOICE
    number: str
    date: date
    counterparty: Optional[Counterparty] = None
    payment_mode: Optional[str] = None
    payment_status: Optional[str] = None
    amount_paid: Decimal = ZERO
    subtotal: Decimal = ZERO
    total_discount: Decimal = ZERO
    total_taxable_value: Decimal = ZERO
    total_cgst: Decimal = ZERO
    total_sgst: Decimal = ZERO
    total_igst: Decimal = ZERO
    grand_total: Decimal = ZERO
    notes: str = ""
    items: list[DocumentLine] = Field(default_factory=list)


class MovementType(str, Enum):
    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"


class StockMovementInfo(BaseModel):
    id: Optional[str] = None
    product_id: str
    product_name: str = "Unknown Product"
    movement_type: MovementType
    quantity: int  # signed: sales are negative
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
