"""Repository for stock movements."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.domain.models.ledger import MovementType, StockMovementInfo
from pharmabill.infrastructure.db.models import StockMovement
from pharmabill.infrastructure.db.repositories.product_repository import (
    ProductRepository,
    as_uuid,
)


def to_movement_info(m: StockMovement) -> StockMovementInfo:
    return StockMovementInfo(
        id=str(m.id),
        product_id=str(m.product_id),
        product_name=(m.product.name if m.product else None) or "Unknown Product",
        movement_type=MovementType(m.movement_type),
        quantity=m.quantity,
        reference_type=m.reference_type,
        reference_id=str(m.reference_id) if m.reference_id else None,
        notes=m.notes,
        created_at=m.created_at,
    )


class StockRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.products = ProductRepository(db)

    async def record_movement(
        self,
        product_id,
        movement_type: MovementType,
        quantity: int,
        *,
        reference_type: str | None = None,
        reference_id=None,
        notes: str | None = None,
    ) -> StockMovementInfo:
        """Insert a movement and apply its signed quantity to product stock.

        Flushes only; the caller owns the transaction.
        """
        movement = StockMovement(
            id=uuid.uuid4(),
            product_id=as_uuid(product_id),
            movement_type=MovementType(movement_type).value,
            quantity=quantity,
            reference_type=reference_type,
            reference_id=as_uuid(reference_id),
            notes=notes,
        )
        self.db.add(movement)
        await self.products.apply_stock_delta(product_id, quantity)
        await self.db.flush()
        return StockMovementInfo(
            id=str(movement.id),
            product_id=str(movement.product_id),
            movement_type=MovementType(movement.movement_type),
            quantity=quantity,
            reference_type=reference_type,
            reference_id=str(movement.reference_id) if movement.reference_id else None,
            notes=notes,
        )

    async def list_movements(
        self,
        product_id=None,
        limit: int = 100,
    ) -> list[StockMovementInfo]:
        stmt = select(StockMovement).order_by(StockMovement.created_at.desc()).limit(limit)
        if product_id is not None:
            stmt = stmt.where(StockMovement.product_id == as_uuid(product_id))
        result = await self.db.execute(stmt)
        return [to_movement_info(m) for m in result.scalars().all()]

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
