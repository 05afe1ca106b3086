"""
Amount Parsing

Amounts arrive as strings and are stored as exact decimals.

DESIGN DECISION: We never go through float. "45.99" must stay 45.99,
not 45.98999999999999843.

parse_amount() returns the error instead of raising it, so callers
decide how to surface it. The validation layer is the only caller that
turns it into an exception.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Union

from finance_tracker.errors import ValidationError


# Plain base-10 literal: optional sign, digits, optional fraction.
# Exponents, NaN and Infinity are rejected even though Decimal accepts them.
_AMOUNT_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

AMOUNT_EMPTY = "Amount cannot be empty"
AMOUNT_INVALID = "Invalid amount format"
AMOUNT_NOT_POSITIVE = "Amount must be greater than zero"


def parse_amount(raw: str) -> Union[Decimal, ValidationError]:
    """
    Parse a user-supplied amount string.

    Returns:
        The exact Decimal value (scale as written, "3.50" stays "3.50"),
        or a ValidationError describing why the input was rejected.
    """
    if raw is None:
        return ValidationError(AMOUNT_EMPTY)

    text = raw.strip()
    if not text:
        return ValidationError(AMOUNT_EMPTY)

    if not _AMOUNT_PATTERN.match(text):
        return ValidationError(AMOUNT_INVALID)

    try:
        value = Decimal(text)
    except InvalidOperation:
        return ValidationError(AMOUNT_INVALID)

    if value <= 0:
        return ValidationError(AMOUNT_NOT_POSITIVE)

    return value
