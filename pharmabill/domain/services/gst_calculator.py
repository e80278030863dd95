# pharmabill/domain/services/gst_calculator.py
"""
GST split for a single taxable amount.

Intra-state supply  -> CGST + SGST, each half of the tax.
Inter-state supply  -> IGST, the full tax.

The seller's home state code is always passed in by the caller; nothing in
here reads settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWO = Decimal("2")


def to_decimal(value) -> Decimal:
    """Coerce form input to Decimal. Anything non-numeric becomes zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, bool):
        return ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    return result if result.is_finite() else ZERO


@dataclass(frozen=True)
class GstSplit:
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO

    @property
    def total_tax(self) -> Decimal:
        return self.cgst + self.sgst + self.igst


def compute_gst(taxable_value, rate_percent, is_inter_state: bool) -> GstSplit:
    taxable_value = to_decimal(taxable_value)
    rate_percent = to_decimal(rate_percent)

    tax = taxable_value * rate_percent / HUNDRED
    if is_inter_state:
        return GstSplit(cgst=ZERO, sgst=ZERO, igst=tax)

    half = tax / TWO
    return GstSplit(cgst=half, sgst=half, igst=ZERO)


def normalize_state_code(code: str | int | None) -> str | None:
    """'7', ' 07 ' and 7 all become '07'. Blank -> None."""
    if code is None:
        return None
    code = str(code).strip()
    if not code:
        return None
    if code.isdigit() and len(code) < 2:
        code = code.zfill(2)
    return code.upper()


def is_inter_state(counterparty_state_code, home_state_code) -> bool:
    """A counterparty in another state (or with no known state) is inter-state."""
    counterparty = normalize_state_code(counterparty_state_code)
    if counterparty is None:
        return True
    return counterparty != normalize_state_code(home_state_code)
