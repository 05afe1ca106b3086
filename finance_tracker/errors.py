"""
Error Taxonomy

Every failing request ends up as exactly one of three kinds:

- VALIDATION: the caller sent something malformed. Raised before the
  store is touched, never retried.
- NOT_FOUND: no row matched the id (and owner, for scoped records).
- INTERNAL: anything else. Logged, surfaced without internal detail.

Storage exceptions live next to the storage interface in
finance_tracker.services.storage.interface. This module holds the kinds
and the validation error, which the models layer needs too.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Machine-distinguishable error classification."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class ValidationIssue(BaseModel):
    """A single problem found in an incoming payload."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'empty', 'invalid_format')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationError(Exception):
    """
    Malformed or semantically invalid input.

    The message is the first issue found; all issues are kept
    so the response can list them.
    """

    def __init__(
        self,
        message: str,
        issues: Optional[list[ValidationIssue]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.issues = issues or []

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> "ValidationError":
        return cls(issues[0].message, issues)

