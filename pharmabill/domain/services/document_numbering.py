# pharmabill/domain/services/document_numbering.py
"""
Human-readable document numbers: ``INV-000043``, ``PUR-000007``.

The sequence itself is owned by the database counter (see
DocumentRepository.allocate_number). This module only formats numbers and
derives a starting point from the latest number already on file.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field

from pharmabill.domain.models.diagnostics import Diagnostic, number_fallback

DEFAULT_WIDTH = 6


@dataclass
class NumberAllocation:
    number: str
    sequence: int | None  # None when the fallback number was used
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.sequence is None


def format_document_number(prefix: str, sequence: int, width: int = DEFAULT_WIDTH) -> str:
    return f"{prefix}{sequence:0{width}d}"


def parse_sequence(number: str | None, prefix: str) -> int | None:
    """Trailing numeric part of ``number`` after ``prefix``, or None."""
    if not number:
        return None
    m = re.search(rf"{re.escape(prefix)}(\d+)\s*$", number.strip())
    if not m:
        return None
    return int(m.group(1))


def next_document_number(
    latest: str | None,
    prefix: str,
    width: int = DEFAULT_WIDTH,
    *,
    now_ms: int | None = None,
) -> NumberAllocation:
    """
    Number that follows ``latest``.

    - ``INV-000042`` -> ``INV-000043``
    - nothing on file -> ``INV-000001``
    - unparseable latest number -> ``INV-<epoch millis>`` with a
      NumberGenerationFallback diagnostic; this number is not part of the
      zero-padded sequence.
    """
    if latest is None or not latest.strip():
        return NumberAllocation(number=format_document_number(prefix, 1, width), sequence=1)

    current = parse_sequence(latest, prefix)
    if current is not None:
        sequence = current + 1
        return NumberAllocation(
            number=format_document_number(prefix, sequence, width),
            sequence=sequence,
        )

    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return NumberAllocation(
        number=f"{prefix}{now_ms}",
        sequence=None,
        diagnostics=[
            number_fallback(
                "Latest document number could not be parsed; using a timestamp number",
                latest=latest,
                prefix=prefix,
            )
        ],
    )
