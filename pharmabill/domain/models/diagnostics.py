# pharmabill/domain/models/diagnostics.py
"""
Degraded-path outcomes collected alongside a computation result.

A diagnostic never aborts the operation that produced it; callers decide
whether to show it, log it or ignore it.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class DiagnosticKind(str, Enum):
    DATA_INTEGRITY = "DataIntegrityWarning"
    NUMBER_FALLBACK = "NumberGenerationFallback"


class Diagnostic(BaseModel):
    kind: DiagnosticKind
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


def data_integrity(message: str, **context: Any) -> Diagnostic:
    return Diagnostic(kind=DiagnosticKind.DATA_INTEGRITY, message=message, context=context)


def number_fallback(message: str, **context: Any) -> Diagnostic:
    return Diagnostic(kind=DiagnosticKind.NUMBER_FALLBACK, message=message, context=context)


def log_diagnostics(logger: logging.Logger, diagnostics: list[Diagnostic]) -> None:
    for diag in diagnostics:
        logger.warning("%s: %s %s", diag.kind.value, diag.message, diag.context or "")
