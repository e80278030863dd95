import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from pharmabill.infrastructure.db.base import Base

# Money and rates keep four decimals; line amounts are rounded to this scale before they are stored.
Money = Numeric(14, 4)


def _created_at():
    return Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))


def _updated_at():
    return Column(
        DateTime(timezone=True),
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=text("CURRENT_TIMESTAMP"),
    )


# ---------------------------------------------------------------------------
# Masters
# ---------------------------------------------------------------------------

class Product(Base):
    __tablename__ = "products"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    hsn_code = Column(String(10), nullable=False, default="")
    batch_number = Column(String(50))
    manufacturer = Column(String(200))
    expiry_date = Column(Date)
    purchase_price = Column(Money, nullable=False, default=0)
    selling_price = Column(Money, nullable=False, default=0)
    gst_rate = Column(Numeric(5, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    unit = Column(String(20))
    category = Column(String(50), default="medicine")
    reorder_level = Column(Integer, nullable=False, default=0)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()


class Customer(Base):
    __tablename__ = "customers"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    phone = Column(String(20))
    email = Column(String(200))
    address = Column(Text)
    gstin = Column(String(15))
    type = Column(String(10), nullable=False, default="B2C")  # B2B | B2C | B2CL
    state = Column(String(100))
    state_code = Column(String(2), nullable=False)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()


class Supplier(Base):
    __tablename__ = "suppliers"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    phone = Column(String(20))
    email = Column(String(200))
    address = Column(Text)
    gstin = Column(String(15))
    state = Column(String(100))
    state_code = Column(String(2), nullable=False)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()


# ---------------------------------------------------------------------------
# Documents. Attribute names are shared between invoices and purchases
# (number, counterparty_id, document_id) so repositories can treat both alike.
# ---------------------------------------------------------------------------

class Invoice(Base):
    __tablename__ = "invoices"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    number = Column("invoice_number", String(30), unique=True, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    counterparty_id = Column("customer_id", UUID(as_uuid=True), ForeignKey("customers.id"), nullable=False)
    payment_mode = Column(String(10), nullable=False, default="cash")
    payment_status = Column(String(10), nullable=False, default="unpaid")
    amount_paid = Column(Money, nullable=False, default=0)
    subtotal = Column(Money, nullable=False, default=0)
    total_discount = Column(Money, nullable=False, default=0)
    total_taxable_value = Column(Money, nullable=False, default=0)
    total_cgst = Column(Money, nullable=False, default=0)
    total_sgst = Column(Money, nullable=False, default=0)
    total_igst = Column(Money, nullable=False, default=0)
    grand_total = Column(Money, nullable=False, default=0)
    notes = Column(Text, default="")
    created_at = _created_at()
    updated_at = _updated_at()

    counterparty = relationship("Customer", lazy="joined")
    items = relationship(
        "InvoiceItem",
        back_populates="document",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column("invoice_id", UUID(as_uuid=True), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=True)
    product_name = Column(String(200), nullable=False, default="")
    hsn_code = Column(String(10), nullable=False, default="")
    batch_number = Column(String(50))
    unit = Column(String(20))
    quantity = Column(Numeric(12, 3), nullable=False, default=0)
    price = Column(Money, nullable=False, default=0)
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    taxable_value = Column(Money, nullable=False, default=0)
    gst_rate = Column(Numeric(5, 2), nullable=False, default=0)
    cgst = Column(Money, nullable=False, default=0)
    sgst = Column(Money, nullable=False, default=0)
    igst = Column(Money, nullable=False, default=0)
    total = Column(Money, nullable=False, default=0)
    created_at = _created_at()

    document = relationship("Invoice", back_populates="items")


class Purchase(Base):
    __tablename__ = "purchases"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    number = Column("purchase_number", String(30), unique=True, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    counterparty_id = Column("supplier_id", UUID(as_uuid=True), ForeignKey("suppliers.id"), nullable=False)
    payment_mode = Column(String(10), nullable=False, default="cash")
    payment_status = Column(String(10), nullable=False, default="unpaid")
    amount_paid = Column(Money, nullable=False, default=0)
    subtotal = Column(Money, nullable=False, default=0)
    total_discount = Column(Money, nullable=False, default=0)
    total_taxable_value = Column(Money, nullable=False, default=0)
    total_cgst = Column(Money, nullable=False, default=0)
    total_sgst = Column(Money, nullable=False, default=0)
    total_igst = Column(Money, nullable=False, default=0)
    grand_total = Column(Money, nullable=False, default=0)
    notes = Column(Text, default="")
    created_at = _created_at()
    updated_at = _updated_at()

    counterparty = relationship("Supplier", lazy="joined")
    items = relationship(
        "PurchaseItem",
        back_populates="document",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class PurchaseItem(Base):
    __tablename__ = "purchase_items"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    document_id = Column("purchase_id", UUID(as_uuid=True), ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=True)
    product_name = Column(String(200), nullable=False, default="")
    hsn_code = Column(String(10), nullable=False, default="")
    batch_number = Column(String(50))
    expiry_date = Column(Date)
    unit = Column(String(20))
    quantity = Column(Numeric(12, 3), nullable=False, default=0)
    price = Column(Money, nullable=False, default=0)
    discount = Column(Numeric(5, 2), nullable=False, default=0)
    taxable_value = Column(Money, nullable=False, default=0)
    gst_rate = Column(Numeric(5, 2), nullable=False, default=0)
    cgst = Column(Money, nullable=False, default=0)
    sgst = Column(Money, nullable=False, default=0)
    igst = Column(Money, nullable=False, default=0)
    total = Column(Money, nullable=False, default=0)
    created_at = _created_at()

    document = relationship("Purchase", back_populates="items")


# ---------------------------------------------------------------------------
# Inventory + numbering
# ---------------------------------------------------------------------------

class StockMovement(Base):
    __tablename__ = "stock_movements"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    product_id = Column(UUID(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)
    movement_type = Column(String(20), nullable=False)  # purchase | sale | adjustment
    quantity = Column(Integer, nullable=False)  # signed
    reference_type = Column(String(30))
    reference_id = Column(UUID(as_uuid=True))
    notes = Column(Text)
    created_at = _created_at()

    product = relationship("Product", lazy="joined")


class DocumentCounter(Base):
    __tablename__ = "document_counters"
    kind = Column(String(20), primary_key=True)  # invoice | purchase
    last_value = Column(Integer, nullable=False, default=0)
    updated_at = _updated_at()
