"""
Response Envelope

Every operation returns the same shape:

    {"success": true,  "status": 200, "data": {...}, "error": null}
    {"success": false, "status": 404, "data": null,
     "error": {"kind": "not_found", "message": "Income record not found", "details": []}}

Classification:
- ValidationError -> 400 validation (with the list of issues)
- NotFoundError   -> 404 not_found
- anything else   -> 500 internal, with a fixed message. Driver and
  pool errors never reach the caller verbatim.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from finance_tracker.errors import ErrorKind, ValidationError
from finance_tracker.services.storage.interface import NotFoundError


INTERNAL_ERROR_MESSAGE = "Internal server error"

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INTERNAL: 500,
}


class ErrorBody(BaseModel):
    kind: ErrorKind
    message: str
    details: list[dict[str, Any]] = Field(default_factory=list)


class Envelope(BaseModel):
    """Uniform success/error wrapper."""

    success: bool
    status: int = Field(
        ...,
        description="HTTP-style status code"
    )
    data: Optional[Any] = None
    error: Optional[ErrorBody] = None

    def to_json(self) -> dict:
        """JSON-safe dict (UUIDs, dates and Decimals rendered as strings)."""
        return self.model_dump(mode="json")


def ok(data: Any) -> Envelope:
    return Envelope(success=True, status=200, data=data)


def created(data: Any) -> Envelope:
    return Envelope(success=True, status=201, data=data)


def classify(exc: BaseException) -> ErrorKind:
    """Pick exactly one error kind for an exception."""
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(exc, NotFoundError):
        return ErrorKind.NOT_FOUND
    return ErrorKind.INTERNAL


def from_exception(exc: BaseException) -> Envelope:
    kind = classify(exc)

    if kind is ErrorKind.VALIDATION:
        body = ErrorBody(
            kind=kind,
            message=exc.message,
            details=[issue.model_dump() for issue in exc.issues],
        )
    elif kind is ErrorKind.NOT_FOUND:
        body = ErrorBody(kind=kind, message=str(exc))
    else:
        body = ErrorBody(kind=kind, message=INTERNAL_ERROR_MESSAGE)

    return Envelope(success=False, status=STATUS_BY_KIND[kind], error=body)
