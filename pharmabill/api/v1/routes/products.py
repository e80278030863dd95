# pharmabill/api/v1/routes/products.py
"""
Product master: create, list, fetch and soft-delete.

Stock is never edited here; it moves through invoices, purchases and
manual adjustments (see ``stock.py``).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.api.v1.envelope import ok, paginated
from pharmabill.api.v1.schemas.masters import ProductCreate
from pharmabill.core.db import get_db
from pharmabill.infrastructure.db.repositories import ProductRepository

logger = logging.getLogger("api.v1.products")

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=dict)
async def list_products(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    search: str | None = Query(default=None, description="Name or HSN code contains"),
    db: AsyncSession = Depends(get_db),
):
    items, total = await ProductRepository(db).list(limit=limit, offset=offset, search=search)
    return paginated(
        items=[p.model_dump() for p in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{product_id}", response_model=dict)
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    product = await ProductRepository(db).get(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return ok(data=product.model_dump())


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductCreate, db: AsyncSession = Depends(get_db)):
    values = body.model_dump()
    values["hsn_code"] = values["hsn_code"].strip()
    product = await ProductRepository(db).create(**values)
    logger.info("Product created: id=%s name=%s", product.id, product.name)
    return ok(data=product.model_dump(), message="Product created")


@router.delete("/{product_id}", response_model=dict)
async def delete_product(product_id: str, db: AsyncSession = Depends(get_db)):
    """Soft delete: the product disappears from pickers but old documents keep it."""
    if not await ProductRepository(db).soft_delete(product_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    logger.info("Product soft-deleted: id=%s", product_id)
    return ok(message="Product deleted")
