# pharmabill/api/v1/routes/stock.py
"""Stock movement history and manual adjustments."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.api.v1.envelope import ok
from pharmabill.core.db import get_db
from pharmabill.domain.services.stock_service import adjust_stock, list_movements
from pharmabill.infrastructure.db.repositories import ProductRepository, StockRepository

logger = logging.getLogger("api.v1.stock")

router = APIRouter(prefix="/stock", tags=["Stock"])


class StockAdjustmentRequest(BaseModel):
    product_id: str
    quantity: int = Field(description="Signed: positive adds stock, negative removes it")
    notes: str | None = Field(default=None, max_length=500)


@router.get("/movements", response_model=dict)
async def get_movements(
    product_id: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """Newest first, optionally for one product."""
    movements = await list_movements(StockRepository(db), product_id=product_id, limit=limit)
    return ok(data=[m.model_dump() for m in movements])


@router.post("/adjustments", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_adjustment(body: StockAdjustmentRequest, db: AsyncSession = Depends(get_db)):
    movement = await adjust_stock(
        body.product_id,
        body.quantity,
        body.notes,
        products=ProductRepository(db),
        stock=StockRepository(db),
    )
    return ok(data=movement.model_dump(), message="Stock adjusted")
