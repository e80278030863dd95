# pharmabill/domain/services/gstin_validation.py
"""GSTIN and PAN format checks, state names and counterparty diagnostics."""

import re

from pharmabill.domain.errors import ValidationError
from pharmabill.domain.models.diagnostics import Diagnostic, data_integrity
from pharmabill.domain.models.ledger import CounterpartyType
from pharmabill.domain.services.gst_calculator import normalize_state_code

PAN_REGEX = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
GSTIN_REGEX = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")

# GST state codes (first two characters of a GSTIN).
STATE_CODES = {
    "01": "Jammu & Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "26": "Dadra & Nagar Haveli and Daman & Diu",
    "27": "Maharashtra",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman & Nicobar",
    "36": "Telangana",
    "37": "Andhra Pradesh",
    "38": "Ladakh",
    "97": "Other Territory",
}


def is_valid_pan(pan: str | None) -> bool:
    return bool(pan) and PAN_REGEX.fullmatch(pan.strip().upper()) is not None


def is_valid_gstin(gstin: str | None) -> bool:
    """State code, embedded PAN, entity number, the fixed Z and a check character."""
    value = (gstin or "").strip().upper()
    if GSTIN_REGEX.fullmatch(value) is None:
        return False
    # Holder's PAN sits after the two-digit state code.
    return is_valid_pan(value[2:12])


def state_name(code: str | None) -> str | None:
    code = normalize_state_code(code)
    if code is None:
        return None
    return STATE_CODES.get(code)


def validate_counterparty(
    counterparty_type: str | None,
    gstin: str | None,
    state_code: str | None,
) -> list[Diagnostic]:
    """
    Check a customer/supplier before it is saved.

    Raises ValidationError for a B2B customer without a valid GSTIN or an
    unknown state code. A GSTIN registered in a different state than the one
    on the record is only reported.
    """
    code = normalize_state_code(state_code)
    if code is None or code not in STATE_CODES:
        raise ValidationError(f"Unknown state code '{state_code}'")

    if counterparty_type == CounterpartyType.B2B.value and not is_valid_gstin(gstin):
        raise ValidationError("A valid GSTIN is required for B2B customers")

    if gstin and not is_valid_gstin(gstin):
        raise ValidationError(f"Invalid GSTIN '{gstin}'")

    diagnostics: list[Diagnostic] = []
    if gstin and gstin.strip()[:2] != code:
        diagnostics.append(
            data_integrity(
                "GSTIN state prefix does not match the state code",
                gstin=gstin,
                state_code=code,
            )
        )
    return diagnostics
