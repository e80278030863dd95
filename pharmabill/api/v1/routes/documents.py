# pharmabill/api/v1/routes/documents.py
"""
Invoice (sales) and purchase endpoints.

Documents are create-only: once saved, their lines and totals never change.
Business-rule failures raised by the ledger surface as 422 via the
``ValidationError`` handler registered in ``main.py``.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.api.v1.envelope import ok, paginated
from pharmabill.api.v1.schemas.documents import DocumentCreate, DocumentCreated
from pharmabill.config.settings import settings
from pharmabill.core.db import get_db
from pharmabill.domain.models.ledger import DocumentKind
from pharmabill.domain.services.document_ledger import create_document
from pharmabill.infrastructure.db.repositories import (
    CounterpartyRepository,
    DocumentRepository,
    ProductRepository,
    StockRepository,
)

logger = logging.getLogger("api.v1.documents")


def _build_router(kind: DocumentKind, path: str, label: str) -> APIRouter:
    router = APIRouter(prefix=path, tags=[f"{label}s"])

    def counterparties(db: AsyncSession) -> CounterpartyRepository:
        if kind is DocumentKind.INVOICE:
            return CounterpartyRepository.customers(db)
        return CounterpartyRepository.suppliers(db)

    def prefix() -> str:
        if kind is DocumentKind.INVOICE:
            return settings.INVOICE_PREFIX
        return settings.PURCHASE_PREFIX

    @router.get("", response_model=dict)
    async def list_documents(
        limit: int = Query(default=20, ge=1, le=100),
        offset: int = Query(default=0, ge=0),
        date_from: date | None = Query(default=None, description="Filter: date >= this"),
        date_to: date | None = Query(default=None, description="Filter: date <= this"),
        db: AsyncSession = Depends(get_db),
    ):
        items, total = await DocumentRepository(db, kind).list(
            limit=limit, offset=offset, date_from=date_from, date_to=date_to
        )
        return paginated(
            items=[d.model_dump() for d in items],
            total=total,
            limit=limit,
            offset=offset,
        )

    @router.get("/{document_id}", response_model=dict)
    async def get_document(document_id: str, db: AsyncSession = Depends(get_db)):
        document = await DocumentRepository(db, kind).get(document_id)
        if document is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        return ok(data=document.model_dump())

    @router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
    async def create(body: DocumentCreate, db: AsyncSession = Depends(get_db)):
        result = await create_document(
            kind,
            body.to_draft(),
            documents=DocumentRepository(db, kind),
            counterparties=counterparties(db),
            products=ProductRepository(db),
            stock=StockRepository(db),
            home_state_code=settings.SELLER_STATE_CODE,
            prefix=prefix(),
            width=settings.DOCUMENT_NUMBER_WIDTH,
        )
        payload = DocumentCreated(document=result.document, diagnostics=result.diagnostics)
        return ok(data=payload.model_dump(), message=f"{label} {result.document.number} created")

    return router


invoices_router = _build_router(DocumentKind.INVOICE, "/invoices", "Invoice")
purchases_router = _build_router(DocumentKind.PURCHASE, "/purchases", "Purchase")
