"""Structured errors for the corpus core.

Every error raised by the corpus carries a stable code and can be rendered
into a consistent envelope for the driver's reporting layer:

    {
        "error": {
            "code": "INVALID_INPUT",
            "message": "Human-readable description",
            "details": [...optional field-level errors...],
            "corpus_id": "abc-123"
        }
    }
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError


# ── Error Codes ──────────────────────────────────────────────────────────────


class ErrorCode(str, Enum):
    """Standard error codes returned in the error envelope."""

    INVALID_INPUT = "INVALID_INPUT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"


# ── Error Schemas ────────────────────────────────────────────────────────────


class FieldError(BaseModel):
    """Individual field validation error."""

    field: str
    message: str
    type: str


class ErrorEnvelope(BaseModel):
    """Standard error envelope."""

    code: str
    message: str
    details: list[FieldError] | list[dict[str, Any]] | None = None
    corpus_id: str | None = None


class ErrorResponse(BaseModel):
    """Top-level error response."""

    error: ErrorEnvelope


# ── Exceptions ───────────────────────────────────────────────────────────────


class CorpusError(Exception):
    """Domain-specific corpus error with structured code + message."""

    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(
        self,
        message: str,
        details: list[dict[str, Any]] | None = None,
        code: ErrorCode | None = None,
    ):
        if code is not None:
            self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    def to_envelope(self, corpus_id: str | None = None) -> ErrorResponse:
        return ErrorResponse(
            error=ErrorEnvelope(
                code=self.code.value,
                message=self.message,
                details=self.details,
                corpus_id=corpus_id,
            )
        )


class InvalidInputError(CorpusError, ValueError):
    """A candidate input violates the corpus contract.

    Raised at the ``upsert`` / ``is_interested_in`` boundary for negative
    runtime or coverage and for non-finite scores, before any state changes.
    """

    code = ErrorCode.INVALID_INPUT


class CorpusInvariantError(CorpusError):
    """The aggregates or the prefix sums drifted from their recomputed values."""

    code = ErrorCode.INVARIANT_VIOLATION


def from_validation_error(exc: ValidationError) -> InvalidInputError:
    """Convert a pydantic ``ValidationError`` into an ``InvalidInputError``."""
    details = []
    for err in exc.errors():
        loc = err.get("loc", [])
        field = ".".join(str(l) for l in loc)
        details.append(
            FieldError(
                field=field or "unknown",
                message=err.get("msg", "Invalid value"),
                type=err.get("type", "value_error"),
            ).model_dump()
        )
    return InvalidInputError(
        f"Execution summary validation failed: {len(details)} error(s)",
        details=details,
        code=ErrorCode.VALIDATION_ERROR,
    )
