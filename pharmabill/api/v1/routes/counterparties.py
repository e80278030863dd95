# pharmabill/api/v1/routes/counterparties.py
"""
Customer and supplier masters.

Both share one set of handlers; the router factory binds each to its ORM model.
Annotations stay eager here so FastAPI sees the per-router body schema.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.api.v1.envelope import ok, paginated
from pharmabill.api.v1.schemas.masters import CustomerCreate, SupplierCreate
from pharmabill.core.db import get_db
from pharmabill.domain.models.diagnostics import log_diagnostics
from pharmabill.domain.services.gst_calculator import normalize_state_code
from pharmabill.domain.services.gstin_validation import state_name, validate_counterparty
from pharmabill.infrastructure.db.models import Customer, Supplier
from pharmabill.infrastructure.db.repositories import CounterpartyRepository

logger = logging.getLogger("api.v1.counterparties")


def _build_router(
    path: str,
    label: str,
    model: type,
    create_schema: type,
) -> APIRouter:
    router = APIRouter(prefix=path, tags=[f"{label}s"])

    @router.get("", response_model=dict)
    async def list_counterparties(
        limit: int = Query(default=20, ge=1, le=100),
        offset: int = Query(default=0, ge=0),
        search: str | None = Query(default=None, description="Name or phone contains"),
        db: AsyncSession = Depends(get_db),
    ):
        items, total = await CounterpartyRepository(db, model).list(limit=limit, offset=offset, search=search)
        return paginated(
            items=[c.model_dump() for c in items],
            total=total,
            limit=limit,
            offset=offset,
        )

    @router.get("/{counterparty_id}", response_model=dict)
    async def get_counterparty(counterparty_id: str, db: AsyncSession = Depends(get_db)):
        party = await CounterpartyRepository(db, model).get(counterparty_id, include_deleted=False)
        if party is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        return ok(data=party.model_dump())

    @router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
    async def create_counterparty(body: create_schema, db: AsyncSession = Depends(get_db)):  # type: ignore[valid-type]
        values = body.model_dump()
        party_type = values.get("type")
        diagnostics = validate_counterparty(
            getattr(party_type, "value", party_type), values.get("gstin"), values["state_code"]
        )

        values["state_code"] = normalize_state_code(values["state_code"])
        values["state"] = values.get("state") or state_name(values["state_code"])
        if values.get("gstin"):
            values["gstin"] = values["gstin"].strip().upper()
        if party_type is not None:
            values["type"] = party_type.value

        party = await CounterpartyRepository(db, model).create(**values)
        log_diagnostics(logger, diagnostics)
        logger.info("%s created: id=%s name=%s", label, party.id, party.name)
        return ok(
            data={
                label.lower(): party.model_dump(),
                "diagnostics": [d.model_dump() for d in diagnostics],
            },
            message=f"{label} created",
        )

    @router.delete("/{counterparty_id}", response_model=dict)
    async def delete_counterparty(counterparty_id: str, db: AsyncSession = Depends(get_db)):
        if not await CounterpartyRepository(db, model).soft_delete(counterparty_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        logger.info("%s soft-deleted: id=%s", label, counterparty_id)
        return ok(message=f"{label} deleted")

    return router


customers_router = _build_router("/customers", "Customer", Customer, CustomerCreate)
suppliers_router = _build_router("/suppliers", "Supplier", Supplier, SupplierCreate)
