# pharmabill/api/v1/schemas/documents.py
"""Request and response schemas for invoice and purchase endpoints."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field

from pharmabill.domain.models.diagnostics import Diagnostic
from pharmabill.domain.models.ledger import (
    DocumentDraft,
    LedgerDocument,
    LineDraft,
    PaymentMode,
    PaymentStatus,
)


class LineInput(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=0)
    price: Decimal | None = Field(default=None, ge=0, description="Defaults to the product's price")
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=100, description="Percent")
    gst_rate: Decimal | None = Field(default=None, ge=0, description="Defaults to the product's rate")
    batch_number: str | None = Field(default=None, max_length=50)
    expiry_date: dt.date | None = None


class DocumentCreate(BaseModel):
    """Header + items for a new invoice (counterparty = customer) or purchase (supplier)."""

    counterparty_id: str = ""
    date: dt.date
    payment_mode: PaymentMode = PaymentMode.CASH
    payment_status: PaymentStatus | None = Field(
        default=None,
        description="Derived from amount_paid when omitted; must agree with it otherwise",
    )
    amount_paid: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str = Field(default="", max_length=2000)
    items: list[LineInput] = Field(default_factory=list)

    def to_draft(self) -> DocumentDraft:
        return DocumentDraft(
            counterparty_id=self.counterparty_id,
            date=self.date,
            payment_mode=self.payment_mode,
            payment_status=self.payment_status,
            amount_paid=self.amount_paid,
            notes=self.notes,
            lines=[LineDraft(**item.model_dump()) for item in self.items],
        )


class DocumentCreated(BaseModel):
    document: LedgerDocument
    diagnostics: list[Diagnostic] = Field(default_factory=list)
