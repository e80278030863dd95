# pharmabill/domain/services/document_ledger.py
"""
Invoice / purchase creation.

compose_document() is pure: it validates the header, prices every line from
the product master, and computes the totals that will be stored with the
document. create_document() performs the lookups, asks the document
repository for the next number, and writes the document, its items and the
resulting stock movements in a single transaction.

Persisted documents are never edited; totals are computed here once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pharmabill.domain.errors import ValidationError
from pharmabill.domain.models.diagnostics import Diagnostic, data_integrity, log_diagnostics
from pharmabill.domain.models.ledger import (
    Counterparty,
    DocumentDraft,
    DocumentKind,
    LedgerDocument,
    PaymentStatus,
    ProductInfo,
)
from pharmabill.domain.services.document_numbering import DEFAULT_WIDTH
from pharmabill.domain.services.gst_calculator import ZERO, is_inter_state, to_decimal
from pharmabill.domain.services.line_items import (
    DocumentTotals,
    LineItem,
    LineItemAggregator,
)
from pharmabill.domain.services.stock_service import record_document_movements

logger = logging.getLogger("document_ledger")

PAISE = Decimal("0.01")

_PARTY_LABEL = {
    DocumentKind.INVOICE: "customer",
    DocumentKind.PURCHASE: "supplier",
}


@dataclass
class ComposedDocument:
    kind: DocumentKind
    draft: DocumentDraft
    counterparty: Counterparty
    is_inter_state: bool
    lines: list[LineItem]
    totals: DocumentTotals
    payment_status: PaymentStatus
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class LedgerResult:
    document: LedgerDocument
    diagnostics: list[Diagnostic] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Payment status
# ---------------------------------------------------------------------------

def derive_payment_status(amount_paid, grand_total) -> PaymentStatus:
    """paid / partial / unpaid from the amount received, compared in paise."""
    paid = to_decimal(amount_paid).quantize(PAISE, rounding=ROUND_HALF_UP)
    due = to_decimal(grand_total).quantize(PAISE, rounding=ROUND_HALF_UP)
    if paid >= due:
        return PaymentStatus.PAID
    if paid <= ZERO:
        return PaymentStatus.UNPAID
    return PaymentStatus.PARTIAL


def resolve_payment_status(
    requested: PaymentStatus | None,
    amount_paid,
    grand_total,
) -> PaymentStatus:
    derived = derive_payment_status(amount_paid, grand_total)
    if requested is None:
        return derived
    requested = PaymentStatus(requested)
    if requested != derived:
        raise ValidationError(
            f"Payment status '{requested.value}' does not match amount paid "
            f"{to_decimal(amount_paid):.2f} against total {to_decimal(grand_total):.2f}"
        )
    return requested


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def validate_draft_header(kind: DocumentKind, draft: DocumentDraft) -> None:
    party = _PARTY_LABEL[kind]
    if not (draft.counterparty_id or "").strip():
        raise ValidationError(f"Please select a {party}")
    if not draft.lines:
        raise ValidationError("Please add at least one item")
    if to_decimal(draft.amount_paid) < ZERO:
        raise ValidationError("Amount paid cannot be negative")


def compose_document(
    kind: DocumentKind,
    draft: DocumentDraft,
    counterparty: Counterparty | None,
    products: dict[str, ProductInfo],
    home_state_code: str,
) -> ComposedDocument:
    kind = DocumentKind(kind)
    validate_draft_header(kind, draft)

    party = _PARTY_LABEL[kind]
    if counterparty is None:
        raise ValidationError(f"Selected {party} does not exist")
    if counterparty.is_deleted:
        raise ValidationError(f"Selected {party} has been deleted")

    inter_state = is_inter_state(counterparty.state_code, home_state_code)
    lines = LineItemAggregator(inter_state, use_purchase_price=kind is DocumentKind.PURCHASE)
    diagnostics: list[Diagnostic] = []

    for index, line_draft in enumerate(draft.lines):
        lines.add_line()
        product = products.get(line_draft.product_id)
        if product is None:
            diagnostics.append(
                data_integrity(
                    "Line references a product that does not exist; draft values used",
                    line=index + 1,
                    product_id=line_draft.product_id,
                )
            )
            lines.update_line(index, product_name="Unknown product")
        else:
            lines.apply_product(index, product)

        changes: dict[str, Any] = {
            "quantity": line_draft.quantity,
            "discount": line_draft.discount,
        }
        if line_draft.price is not None:
            changes["price"] = line_draft.price
        if line_draft.gst_rate is not None:
            changes["gst_rate"] = line_draft.gst_rate
        if line_draft.batch_number:
            changes["batch_number"] = line_draft.batch_number
        if line_draft.expiry_date:
            changes["expiry_date"] = line_draft.expiry_date
        lines.update_line(index, **changes)

    totals = lines.compute_totals()
    status = resolve_payment_status(draft.payment_status, draft.amount_paid, totals.grand_total)

    return ComposedDocument(
        kind=kind,
        draft=draft,
        counterparty=counterparty,
        is_inter_state=inter_state,
        lines=list(lines),
        totals=totals,
        payment_status=status,
        diagnostics=diagnostics,
    )


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

async def create_document(
    kind: DocumentKind,
    draft: DocumentDraft,
    *,
    documents: Any,
    counterparties: Any,
    products: Any,
    stock: Any,
    home_state_code: str,
    prefix: str,
    width: int = DEFAULT_WIDTH,
) -> LedgerResult:
    """
    Validate, total, number and store a new invoice or purchase.

    ``documents``/``counterparties``/``products``/``stock`` are the repositories
    for this kind of document, all bound to the same session. Nothing is
    written when validation fails.
    """
    kind = DocumentKind(kind)
    validate_draft_header(kind, draft)

    counterparty = await counterparties.get(draft.counterparty_id)
    product_map = await products.get_many([line.product_id for line in draft.lines])
    composed = compose_document(kind, draft, counterparty, product_map, home_state_code)

    try:
        allocation = await documents.allocate_number(prefix, width)
        document = await documents.add(composed, allocation.number)
        await record_document_movements(kind, document.id, document.number, composed.lines, stock)
        await documents.commit()
    except Exception:
        await documents.rollback()
        logger.exception("Failed to create %s for %s", kind.value, draft.counterparty_id)
        raise

    diagnostics = composed.diagnostics + allocation.diagnostics
    log_diagnostics(logger, diagnostics)
    logger.info(
        "Created %s %s: party=%s lines=%d grand_total=%.2f status=%s",
        kind.value,
        document.number,
        counterparty.name,
        len(composed.lines),
        composed.totals.grand_total,
        composed.payment_status.value,
    )
    return LedgerResult(document=document, diagnostics=diagnostics)
