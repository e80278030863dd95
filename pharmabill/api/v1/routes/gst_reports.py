# pharmabill/api/v1/routes/gst_reports.py
"""GSTR-1 style outward-supply report (B2B / B2CL / B2CS / HSN)."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.api.v1.envelope import ok
from pharmabill.core.db import get_db
from pharmabill.domain.models.ledger import DocumentKind
from pharmabill.domain.services.dashboard_service import month_bounds
from pharmabill.domain.services.gst_report import build_gst_report
from pharmabill.infrastructure.db.repositories import DocumentRepository

logger = logging.getLogger("api.v1.gst_reports")

router = APIRouter(prefix="/gst", tags=["GST Reports"])


@router.get("/reports", response_model=dict)
async def gst_report(
    date_from: date | None = Query(default=None, description="Period start (inclusive)"),
    date_to: date | None = Query(default=None, description="Period end (inclusive)"),
    db: AsyncSession = Depends(get_db),
):
    """Classify every invoice in the period. Defaults to the current month."""
    if date_from is None or date_to is None:
        start, end = month_bounds(date.today().strftime("%Y-%m"))
        date_from = date_from or start
        date_to = date_to or end
    if date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="date_from must not be after date_to",
        )

    report = await build_gst_report(DocumentRepository(db, DocumentKind.INVOICE), date_from, date_to)
    return ok(data=report.model_dump())
