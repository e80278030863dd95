# pharmabill/api/v1/schemas/masters.py
"""Request schemas for products, customers and suppliers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from pharmabill.domain.models.ledger import CounterpartyType


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    hsn_code: str = Field(default="", max_length=10)
    batch_number: str | None = Field(default=None, max_length=50)
    manufacturer: str | None = Field(default=None, max_length=200)
    expiry_date: date | None = None
    purchase_price: Decimal = Field(default=Decimal("0"), ge=0)
    selling_price: Decimal = Field(default=Decimal("0"), ge=0)
    gst_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    stock: int = Field(default=0, ge=0)
    unit: str | None = Field(default=None, max_length=20)
    category: str | None = Field(default="medicine", max_length=50)
    reorder_level: int = Field(default=0, ge=0)


class CounterpartyBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=20)
    email: str | None = Field(default=None, max_length=200)
    address: str | None = None
    gstin: str | None = Field(default=None, max_length=15)
    state: str | None = Field(default=None, max_length=100)
    state_code: str = Field(pattern=r"^\d{1,2}$", description="2-digit GST state code")


class CustomerCreate(CounterpartyBase):
    type: CounterpartyType = CounterpartyType.B2C


class SupplierCreate(CounterpartyBase):
    pass
