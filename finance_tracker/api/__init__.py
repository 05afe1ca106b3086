"""Response mapping package."""

from finance_tracker.api.responses import (
    Envelope,
    ErrorBody,
    INTERNAL_ERROR_MESSAGE,
    classify,
    created,
    from_exception,
    ok,
)

__all__ = [
    "Envelope",
    "ErrorBody",
    "INTERNAL_ERROR_MESSAGE",
    "classify",
    "created",
    "from_exception",
    "ok",
]
