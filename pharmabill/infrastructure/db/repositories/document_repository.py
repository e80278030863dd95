"""Repository for invoices and purchases, including document-number allocation."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.domain.models.ledger import (
    Counterparty,
    DocumentKind,
    DocumentLine,
    LedgerDocument,
)
from pharmabill.domain.services.document_numbering import (
    DEFAULT_WIDTH,
    NumberAllocation,
    format_document_number,
    next_document_number,
)
from pharmabill.infrastructure.db.models import (
    DocumentCounter,
    Invoice,
    InvoiceItem,
    Purchase,
    PurchaseItem,
)
from pharmabill.infrastructure.db.repositories.counterparty_repository import to_counterparty
from pharmabill.infrastructure.db.repositories.product_repository import as_uuid

if TYPE_CHECKING:
    from pharmabill.domain.services.document_ledger import ComposedDocument

logger = logging.getLogger("document_repository")

_MODELS = {
    DocumentKind.INVOICE: (Invoice, InvoiceItem),
    DocumentKind.PURCHASE: (Purchase, PurchaseItem),
}


def _to_line(item) -> DocumentLine:
    return DocumentLine(
        id=str(item.id) if item.id else None,
        product_id=str(item.product_id) if item.product_id else None,
        product_name=item.product_name or "",
        hsn_code=item.hsn_code or "",
        batch_number=item.batch_number,
        expiry_date=getattr(item, "expiry_date", None),
        unit=item.unit,
        quantity=item.quantity or 0,
        price=item.price or 0,
        discount=item.discount or 0,
        taxable_value=item.taxable_value or 0,
        gst_rate=item.gst_rate or 0,
        cgst=item.cgst or 0,
        sgst=item.sgst or 0,
        igst=item.igst or 0,
        total=item.total or 0,
    )


def to_ledger_document(
    doc,
    kind: DocumentKind,
    counterparty: Counterparty | None = None,
) -> LedgerDocument:
    """Convert an Invoice/Purchase row (with items loaded) to a LedgerDocument."""
    if counterparty is None and doc.counterparty is not None:
        counterparty = to_counterparty(doc.counterparty)
    return LedgerDocument(
        id=str(doc.id),
        kind=kind,
        number=doc.number,
        date=doc.date,
        counterparty=counterparty,
        payment_mode=doc.payment_mode,
        payment_status=doc.payment_status,
        amount_paid=doc.amount_paid or 0,
        subtotal=doc.subtotal or 0,
        total_discount=doc.total_discount or 0,
        total_taxable_value=doc.total_taxable_value or 0,
        total_cgst=doc.total_cgst or 0,
        total_sgst=doc.total_sgst or 0,
        total_igst=doc.total_igst or 0,
        grand_total=doc.grand_total or 0,
        notes=doc.notes or "",
        items=[_to_line(i) for i in doc.items],
    )


class DocumentRepository:
    def __init__(self, db: AsyncSession, kind: DocumentKind = DocumentKind.INVOICE) -> None:
        self.db = db
        self.kind = DocumentKind(kind)
        self.model, self.item_model = _MODELS[self.kind]

    # ---------- numbering ----------

    async def latest_number(self) -> str | None:
        """Number of the most recently created document of this kind."""
        stmt = (
            select(self.model.number)
            .order_by(self.model.created_at.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def allocate_number(
        self,
        prefix: str,
        width: int = DEFAULT_WIDTH,
    ) -> NumberAllocation:
        """
        Reserve the next number from the per-kind counter.

        The increment is a single UPDATE ... RETURNING, so two concurrent
        creates can never receive the same value. The first allocation for a
        kind seeds the counter from the latest stored document number.
        """
        stmt = (
            update(DocumentCounter)
            .where(DocumentCounter.kind == self.kind.value)
            .values(last_value=DocumentCounter.last_value + 1)
            .returning(DocumentCounter.last_value)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        value = result.scalar_one_or_none()
        if value is not None:
            return NumberAllocation(
                number=format_document_number(prefix, value, width),
                sequence=value,
            )

        latest = await self.latest_number()
        allocation = next_document_number(latest, prefix, width)
        try:
            async with self.db.begin_nested():
                self.db.add(
                    DocumentCounter(kind=self.kind.value, last_value=allocation.sequence or 0)
                )
        except IntegrityError:
            # Another writer seeded the counter between our UPDATE and INSERT.
            logger.info("Counter for %s seeded concurrently, retrying", self.kind.value)
            return await self.allocate_number(prefix, width)

        logger.info(
            "Seeded %s counter from latest number %r -> %s",
            self.kind.value, latest, allocation.number,
        )
        return allocation

    # ---------- writes (flush only, caller commits) ----------

    def _item_values(self, line) -> dict:
        values = {
            "id": uuid.uuid4(),
            "product_id": as_uuid(line.product_id),
            "product_name": line.product_name or "",
            "hsn_code": line.hsn_code or "",
            "batch_number": line.batch_number,
            "unit": line.unit,
            "quantity": line.quantity,
            "price": line.price,
            "discount": line.discount,
            "taxable_value": line.taxable_value,
            "gst_rate": line.gst_rate,
            "cgst": line.cgst,
            "sgst": line.sgst,
            "igst": line.igst,
            "total": line.total,
        }
        if self.item_model is PurchaseItem:
            values["expiry_date"] = line.expiry_date
        return values

    async def add(self, composed: "ComposedDocument", number: str) -> LedgerDocument:
        """Insert the document row and its item rows in the current transaction."""
        draft = composed.draft
        doc = self.model(
            id=uuid.uuid4(),
            number=number,
            date=draft.date,
            counterparty_id=as_uuid(composed.counterparty.id),
            payment_mode=draft.payment_mode.value,
            payment_status=composed.payment_status.value,
            amount_paid=draft.amount_paid,
            notes=draft.notes or "",
            **composed.totals.to_dict(),
        )
        doc.items = [self.item_model(**self._item_values(line)) for line in composed.lines]
        self.db.add(doc)
        await self.db.flush()
        return to_ledger_document(doc, self.kind, composed.counterparty)

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

    # ---------- reads ----------

    async def get(self, document_id) -> LedgerDocument | None:
        did = as_uuid(document_id)
        if did is None:
            return None
        result = await self.db.execute(select(self.model).where(self.model.id == did))
        doc = result.scalar_one_or_none()
        return to_ledger_document(doc, self.kind) if doc else None

    async def list(
        self,
        limit: int = 20,
        offset: int = 0,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> tuple[list[LedgerDocument], int]:
        q = select(self.model)
        if date_from:
            q = q.where(self.model.date >= date_from)
        if date_to:
            q = q.where(self.model.date <= date_to)

        total = (await self.db.execute(select(func.count()).select_from(q.subquery()))).scalar() or 0
        q = q.order_by(self.model.created_at.desc()).offset(offset).limit(limit)
        result = await self.db.execute(q)
        return [to_ledger_document(d, self.kind) for d in result.scalars().all()], total

    async def list_for_period(self, start: date, end: date) -> list[LedgerDocument]:
        """All documents dated within [start, end], oldest first."""
        stmt = (
            select(self.model)
            .where(and_(self.model.date >= start, self.model.date <= end))
            .order_by(self.model.date, self.model.number)
        )
        result = await self.db.execute(stmt)
        return [to_ledger_document(d, self.kind) for d in result.scalars().all()]
