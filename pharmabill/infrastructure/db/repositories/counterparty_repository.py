"""Repository for customers and suppliers (the two counterparty tables)."""

from __future__ import annotations

import uuid

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.domain.models.ledger import Counterparty
from pharmabill.infrastructure.db.models import Customer, Supplier
from pharmabill.infrastructure.db.repositories.product_repository import as_uuid


def to_counterparty(row) -> Counterparty:
    return Counterparty(
        id=str(row.id),
        name=row.name,
        phone=row.phone,
        email=row.email,
        address=row.address,
        gstin=row.gstin,
        type=getattr(row, "type", None),
        state=row.state,
        state_code=row.state_code,
        is_deleted=bool(row.is_deleted),
    )


class CounterpartyRepository:
    """Works on either ``Customer`` or ``Supplier`` rows."""

    def __init__(self, db: AsyncSession, model=Customer) -> None:
        if model not in (Customer, Supplier):
            raise ValueError(f"Unsupported counterparty model: {model!r}")
        self.db = db
        self.model = model

    @classmethod
    def customers(cls, db: AsyncSession) -> "CounterpartyRepository":
        return cls(db, Customer)

    @classmethod
    def suppliers(cls, db: AsyncSession) -> "CounterpartyRepository":
        return cls(db, Supplier)

    async def create(self, **values) -> Counterparty:
        if self.model is Supplier:
            values.pop("type", None)
        row = self.model(id=uuid.uuid4(), **values)
        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return to_counterparty(row)

    async def get(self, counterparty_id, include_deleted: bool = True) -> Counterparty | None:
        """Look up by id. Deleted rows are returned (flagged) unless excluded."""
        cid = as_uuid(counterparty_id)
        if cid is None:
            return None
        conditions = [self.model.id == cid]
        if not include_deleted:
            conditions.append(self.model.is_deleted.is_(False))
        result = await self.db.execute(select(self.model).where(and_(*conditions)))
        row = result.scalar_one_or_none()
        return to_counterparty(row) if row else None

    async def list(
        self,
        limit: int = 20,
        offset: int = 0,
        search: str | None = None,
    ) -> tuple[list[Counterparty], int]:
        q = select(self.model).where(self.model.is_deleted.is_(False))
        if search:
            pattern = f"%{search.strip()}%"
            q = q.where(self.model.name.ilike(pattern) | self.model.phone.ilike(pattern))

        total = (await self.db.execute(select(func.count()).select_from(q.subquery()))).scalar() or 0
        q = q.order_by(self.model.name).offset(offset).limit(limit)
        result = await self.db.execute(q)
        return [to_counterparty(r) for r in result.scalars().all()], total

    async def list_active(self) -> list[Counterparty]:
        result = await self.db.execute(
            select(self.model).where(self.model.is_deleted.is_(False)).order_by(self.model.name)
        )
        return [to_counterparty(r) for r in result.scalars().all()]

    async def soft_delete(self, counterparty_id) -> bool:
        cid = as_uuid(counterparty_id)
        if cid is None:
            return False
        stmt = (
            update(self.model)
            .where(and_(self.model.id == cid, self.model.is_deleted.is_(False)))
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount > 0
