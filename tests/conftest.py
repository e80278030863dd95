"""Shared test fixtures for the pharmacy ledger test suite."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from pharmabill.domain.models.ledger import (
    Counterparty,
    DocumentLine,
    LedgerDocument,
    ProductInfo,
)


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def paracetamol() -> ProductInfo:
    return ProductInfo(
        id="11111111-1111-1111-1111-111111111111",
        name="Paracetamol 500mg",
        hsn_code="3004",
        batch_number="PCM-24A",
        unit="strip",
        purchase_price=Decimal("30"),
        selling_price=Decimal("50"),
        gst_rate=Decimal("12"),
        stock=100,
        reorder_level=20,
    )


@pytest.fixture
def bandage() -> ProductInfo:
    return ProductInfo(
        id="22222222-2222-2222-2222-222222222222",
        name="Crepe Bandage",
        hsn_code="3005",
        unit="pcs",
        purchase_price=Decimal("60"),
        selling_price=Decimal("100"),
        gst_rate=Decimal("18"),
        stock=5,
        reorder_level=10,
    )


@pytest.fixture
def local_customer() -> Counterparty:
    """Walk-in customer in the home state (Maharashtra)."""
    return Counterparty(id="c-local", name="Ramesh Patil", type="B2C", state_code="27")


@pytest.fixture
def gujarat_customer() -> Counterparty:
    return Counterparty(
        id="c-guj",
        name="Shah Medicals",
        type="B2B",
        gstin="24AAACS1234F1Z5",
        state_code="24",
    )


def make_invoice(
    number: str,
    party: Counterparty | None,
    lines: list[DocumentLine],
    on: date = date(2025, 1, 15),
) -> LedgerDocument:
    """Invoice whose totals are the sums of its lines."""
    return LedgerDocument(
        number=number,
        date=on,
        counterparty=party,
        total_taxable_value=sum((l.taxable_value for l in lines), Decimal("0")),
        total_cgst=sum((l.cgst for l in lines), Decimal("0")),
        total_sgst=sum((l.sgst for l in lines), Decimal("0")),
        total_igst=sum((l.igst for l in lines), Decimal("0")),
        grand_total=sum((l.total for l in lines), Decimal("0")),
        items=lines,
    )


def make_line(hsn: str, rate, taxable, *, inter_state: bool = False, quantity=1, name="Item") -> DocumentLine:
    rate = Decimal(str(rate))
    taxable = Decimal(str(taxable))
    tax = taxable * rate / 100
    half = tax / 2
    return DocumentLine(
        product_name=name,
        hsn_code=hsn,
        quantity=Decimal(str(quantity)),
        price=taxable,
        taxable_value=taxable,
        gst_rate=rate,
        cgst=Decimal("0") if inter_state else half,
        sgst=Decimal("0") if inter_state else half,
        igst=tax if inter_state else Decimal("0"),
        total=taxable + tax,
    )
