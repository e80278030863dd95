"""initial ledger schema

Revision ID: 1f3a9c2e7b10
Revises:
Create Date: 2026-10-19 10:12:31.418204

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision = "1f3a9c2e7b10"
down_revision = None
branch_labels = None
depends_on = None

MONEY = sa.Numeric(14, 4)
RATE = sa.Numeric(5, 2)
NOW = sa.text("CURRENT_TIMESTAMP")


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=NOW)]
    if updated:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW))
    return cols


def _party_columns() -> list[sa.Column]:
    return [
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("email", sa.String(200)),
        sa.Column("address", sa.Text()),
        sa.Column("gstin", sa.String(15)),
    ]


def _document_table(table: str, number_col: str, party_col: str, party_table: str) -> None:
    op.create_table(
        table,
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(number_col, sa.String(30), nullable=False, unique=True, index=True),
        sa.Column("date", sa.Date(), nullable=False, index=True),
        sa.Column(party_col, UUID(as_uuid=True), sa.ForeignKey(f"{party_table}.id"), nullable=False),
        sa.Column("payment_mode", sa.String(10), nullable=False, server_default="cash"),
        sa.Column("payment_status", sa.String(10), nullable=False, server_default="unpaid"),
        sa.Column("amount_paid", MONEY, nullable=False, server_default="0"),
        sa.Column("subtotal", MONEY, nullable=False, server_default="0"),
        sa.Column("total_discount", MONEY, nullable=False, server_default="0"),
        sa.Column("total_taxable_value", MONEY, nullable=False, server_default="0"),
        sa.Column("total_cgst", MONEY, nullable=False, server_default="0"),
        sa.Column("total_sgst", MONEY, nullable=False, server_default="0"),
        sa.Column("total_igst", MONEY, nullable=False, server_default="0"),
        sa.Column("grand_total", MONEY, nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), server_default=""),
        *_timestamps(),
    )


def _item_table(table: str, parent_col: str, parent_table: str, with_expiry: bool) -> None:
    extra = [sa.Column("expiry_date", sa.Date())] if with_expiry else []
    op.create_table(
        table,
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            parent_col,
            UUID(as_uuid=True),
            sa.ForeignKey(f"{parent_table}.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("product_id", UUID(as_uuid=True), sa.ForeignKey("products.id"), nullable=True),
        sa.Column("product_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("hsn_code", sa.String(10), nullable=False, server_default=""),
        sa.Column("batch_number", sa.String(50)),
        *extra,
        sa.Column("unit", sa.String(20)),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False, server_default="0"),
        sa.Column("price", MONEY, nullable=False, server_default="0"),
        sa.Column("discount", RATE, nullable=False, server_default="0"),
        sa.Column("taxable_value", MONEY, nullable=False, server_default="0"),
        sa.Column("gst_rate", RATE, nullable=False, server_default="0"),
        sa.Column("cgst", MONEY, nullable=False, server_default="0"),
        sa.Column("sgst", MONEY, nullable=False, server_default="0"),
        sa.Column("igst", MONEY, nullable=False, server_default="0"),
        sa.Column("total", MONEY, nullable=False, server_default="0"),
        *_timestamps(updated=False),
    )


def upgrade() -> None:
    # Masters
    op.create_table(
        "products",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("hsn_code", sa.String(10), nullable=False, server_default=""),
        sa.Column("batch_number", sa.String(50)),
        sa.Column("manufacturer", sa.String(200)),
        sa.Column("expiry_date", sa.Date()),
        sa.Column("purchase_price", MONEY, nullable=False, server_default="0"),
        sa.Column("selling_price", MONEY, nullable=False, server_default="0"),
        sa.Column("gst_rate", RATE, nullable=False, server_default="0"),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unit", sa.String(20)),
        sa.Column("category", sa.String(50), server_default="medicine"),
        sa.Column("reorder_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "customers",
        *_party_columns(),
        sa.Column("type", sa.String(10), nullable=False, server_default="B2C"),
        sa.Column("state", sa.String(100)),
        sa.Column("state_code", sa.String(2), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_table(
        "suppliers",
        *_party_columns(),
        sa.Column("state", sa.String(100)),
        sa.Column("state_code", sa.String(2), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    # Documents
    _document_table("invoices", "invoice_number", "customer_id", "customers")
    _item_table("invoice_items", "invoice_id", "invoices", with_expiry=False)
    _document_table("purchases", "purchase_number", "supplier_id", "suppliers")
    _item_table("purchase_items", "purchase_id", "purchases", with_expiry=True)

    # Inventory + numbering
    op.create_table(
        "stock_movements",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("product_id", UUID(as_uuid=True), sa.ForeignKey("products.id"), nullable=False, index=True),
        sa.Column("movement_type", sa.String(20), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("reference_type", sa.String(30)),
        sa.Column("reference_id", UUID(as_uuid=True)),
        sa.Column("notes", sa.Text()),
        *_timestamps(updated=False),
    )
    op.create_table(
        "document_counters",
        sa.Column("kind", sa.String(20), primary_key=True),
        sa.Column("last_value", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=NOW),
    )


def downgrade() -> None:
    op.drop_table("document_counters")
    op.drop_table("stock_movements")
    op.drop_table("purchase_items")
    op.drop_table("purchases")
    op.drop_table("invoice_items")
    op.drop_table("invoices")
    op.drop_table("suppliers")
    op.drop_table("customers")
    op.drop_table("products")
