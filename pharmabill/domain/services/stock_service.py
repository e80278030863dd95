# pharmabill/domain/services/stock_service.py
"""
Stock movements.

Sales take stock out (negative quantity), purchases bring it in, and manual
adjustments carry whatever signed delta the user entered. Every movement
also updates the product's on-hand stock.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pharmabill.domain.errors import ValidationError
from pharmabill.domain.models.ledger import DocumentKind, MovementType, StockMovementInfo

logger = logging.getLogger("stock_service")

_MOVEMENT_FOR_KIND = {
    DocumentKind.INVOICE: (MovementType.SALE, -1),
    DocumentKind.PURCHASE: (MovementType.PURCHASE, 1),
}


def _whole_units(quantity) -> int:
    return int(Decimal(str(quantity)).to_integral_value(rounding=ROUND_HALF_UP))


async def record_document_movements(
    kind: DocumentKind,
    document_id: str | None,
    document_number: str,
    lines,
    stock: Any,
) -> list[StockMovementInfo]:
    """One movement per line that references a known product."""
    movement_type, sign = _MOVEMENT_FOR_KIND[kind]
    movements: list[StockMovementInfo] = []
    for line in lines:
        if not line.product_id:
            continue
        units = _whole_units(line.quantity)
        if units == 0:
            continue
        movements.append(
            await stock.record_movement(
                line.product_id,
                movement_type,
                sign * units,
                reference_type=kind.value,
                reference_id=document_id,
                notes=document_number,
            )
        )
    return movements


async def adjust_stock(
    product_id: str,
    quantity: int,
    notes: str | None,
    *,
    products: Any,
    stock: Any,
) -> StockMovementInfo:
    """Manual correction (breakage, expiry write-off, recount)."""
    if quantity == 0:
        raise ValidationError("Adjustment quantity cannot be zero")

    product = await products.get(product_id)
    if product is None:
        raise ValidationError("Product not found")

    try:
        movement = await stock.record_movement(
            product.id,
            MovementType.ADJUSTMENT,
            quantity,
            reference_type="manual_adjustment",
            notes=notes,
        )
        await stock.commit()
    except Exception:
        await stock.rollback()
        raise

    logger.info(
        "Stock adjusted: product=%s delta=%d new_stock=%d",
        product.id, quantity, product.stock + quantity,
    )
    return movement.model_copy(update={"product_name": product.name})


async def list_movements(stock: Any, product_id: str | None = None, limit: int = 100) -> list[StockMovementInfo]:
    return await stock.list_movements(product_id=product_id, limit=limit)
