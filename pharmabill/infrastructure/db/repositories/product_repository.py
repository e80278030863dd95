"""Repository for the product master (inventory)."""

from __future__ import annotations

import uuid

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pharmabill.domain.models.ledger import ProductInfo
from pharmabill.infrastructure.db.models import Product


def as_uuid(value) -> uuid.UUID | None:
    """Parse an id coming from the API / a draft. Garbage -> None."""
    if value is None or value == "":
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


def to_product_info(p: Product) -> ProductInfo:
    return ProductInfo(
        id=str(p.id),
        name=p.name,
        hsn_code=p.hsn_code or "",
        batch_number=p.batch_number,
        manufacturer=p.manufacturer,
        unit=p.unit,
        category=p.category,
        expiry_date=p.expiry_date,
        purchase_price=p.purchase_price or 0,
        selling_price=p.selling_price or 0,
        gst_rate=p.gst_rate or 0,
        stock=p.stock or 0,
        reorder_level=p.reorder_level or 0,
        is_deleted=bool(p.is_deleted),
    )


class ProductRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create(self, **values) -> ProductInfo:
        product = Product(id=uuid.uuid4(), **values)
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return to_product_info(product)

    async def get(self, product_id, include_deleted: bool = False) -> ProductInfo | None:
        pid = as_uuid(product_id)
        if pid is None:
            return None
        conditions = [Product.id == pid]
        if not include_deleted:
            conditions.append(Product.is_deleted.is_(False))
        result = await self.db.execute(select(Product).where(and_(*conditions)))
        product = result.scalar_one_or_none()
        return to_product_info(product) if product else None

    async def get_many(self, product_ids) -> dict[str, ProductInfo]:
        """Active products keyed by id. Unknown or malformed ids are simply absent."""
        ids = {pid for pid in (as_uuid(v) for v in product_ids) if pid is not None}
        if not ids:
            return {}
        stmt = select(Product).where(
            and_(Product.id.in_(ids), Product.is_deleted.is_(False))
        )
        result = await self.db.execute(stmt)
        return {str(p.id): to_product_info(p) for p in result.scalars().all()}

    async def list(
        self,
        limit: int = 20,
        offset: int = 0,
        search: str | None = None,
    ) -> tuple[list[ProductInfo], int]:
        q = select(Product).where(Product.is_deleted.is_(False))
        if search:
            pattern = f"%{search.strip()}%"
            q = q.where(Product.name.ilike(pattern) | Product.hsn_code.ilike(pattern))

        total = (await self.db.execute(select(func.count()).select_from(q.subquery()))).scalar() or 0
        q = q.order_by(Product.name).offset(offset).limit(limit)
        result = await self.db.execute(q)
        return [to_product_info(p) for p in result.scalars().all()], total

    async def list_active(self) -> list[ProductInfo]:
        result = await self.db.execute(
            select(Product).where(Product.is_deleted.is_(False)).order_by(Product.name)
        )
        return [to_product_info(p) for p in result.scalars().all()]

    async def soft_delete(self, product_id) -> bool:
        pid = as_uuid(product_id)
        if pid is None:
            return False
        stmt = (
            update(Product)
            .where(and_(Product.id == pid, Product.is_deleted.is_(False)))
            .values(is_deleted=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount > 0

    async def apply_stock_delta(self, product_id, delta: int) -> None:
        """Add ``delta`` to on-hand stock. Flushes only; the caller commits."""
        stmt = (
            update(Product)
            .where(Product.id == as_uuid(product_id))
            .values(stock=Product.stock + delta)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)
