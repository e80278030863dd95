# pharmabill/api/v1/routes/dashboard.py
"""Home screen figures, the sales ledger (receivables) and the customer report."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.api.v1.envelope import ok
from pharmabill.config.settings import settings
from pharmabill.core.db import get_db
from pharmabill.domain.models.ledger import DocumentKind
from pharmabill.domain.services.dashboard_service import (
    customer_report,
    expiring_products,
    low_stock,
    month_bounds,
    month_summary,
    previous_month,
    sales_ledger_summary,
)
from pharmabill.infrastructure.db.repositories import (
    CounterpartyRepository,
    DocumentRepository,
    ProductRepository,
)

logger = logging.getLogger("api.v1.dashboard")

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=dict)
async def dashboard(
    month: str | None = Query(
        default=None,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="YYYY-MM, defaults to the current month",
    ),
    db: AsyncSession = Depends(get_db),
):
    today = date.today()
    month = month or today.strftime("%Y-%m")
    start, _ = month_bounds(previous_month(month))
    this_month_start, end = month_bounds(month)

    products = await ProductRepository(db).list_active()
    invoices = await DocumentRepository(db, DocumentKind.INVOICE).list_for_period(start, end)
    purchases = await DocumentRepository(db, DocumentKind.PURCHASE).list_for_period(start, end)

    return ok(
        data={
            "low_stock": [p.model_dump() for p in low_stock(products)],
            "expiring": [
                p.model_dump()
                for p in expiring_products(products, today, settings.EXPIRY_ALERT_DAYS)
            ],
            "summary": month_summary(invoices, purchases, month).to_dict(),
            "receivables": sales_ledger_summary(
                [d for d in invoices if this_month_start <= d.date <= end]
            ).to_dict(),
        }
    )


@router.get("/sales", response_model=dict)
async def sales_ledger(
    date_from: date | None = Query(default=None, description="Defaults to the start of the current month"),
    date_to: date | None = Query(default=None, description="Defaults to the end of the current month"),
    db: AsyncSession = Depends(get_db),
):
    """Billed vs received vs pending for the period, with the GST breakup."""
    start, end = month_bounds(date.today().strftime("%Y-%m"))
    date_from = date_from or start
    date_to = date_to or end
    if date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="date_from must not be after date_to",
        )

    invoices = await DocumentRepository(db, DocumentKind.INVOICE).list_for_period(date_from, date_to)
    data = sales_ledger_summary(invoices).to_dict()
    data.update(date_from=date_from, date_to=date_to)
    return ok(data=data)


@router.get("/customers", response_model=dict)
async def customers_report(
    date_from: date | None = Query(default=None, description="Defaults to all time"),
    date_to: date | None = Query(default=None, description="Defaults to all time"),
    db: AsyncSession = Depends(get_db),
):
    """Every active customer with invoice count, amount billed and last invoice date."""
    customers = await CounterpartyRepository.customers(db).list_active()
    invoices = await DocumentRepository(db, DocumentKind.INVOICE).list_for_period(
        date_from or date.min, date_to or date.max
    )
    return ok(data=[row.to_dict() for row in customer_report(customers, invoices)])
