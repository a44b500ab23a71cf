"""Validation of raw payment requests."""

from __future__ import annotations

import re

from payproc.protocol import INVALID_AMOUNT, INVALID_REQUEST, PAYMENT_MARKER, SEPARATOR

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class ValidationError(ValueError):
    """Raised when a request is malformed or carries an unusable amount."""


class AmountValidator:
    """Checks that a request is of the form ``PAYMENT|<positive integer>``."""

    def validate(self, request: str) -> int:
        """Return the amount of a well-formed payment request.

        Raises ``ValidationError`` with the message ``Invalid request`` when the
        request is not two fields led by the payment marker, and
        ``Invalid amount`` when the amount is not a positive integer.
        """
        parts = request.split(SEPARATOR)
        if len(parts) != 2 or parts[0] != PAYMENT_MARKER:
            raise ValidationError(INVALID_REQUEST)

        text = parts[1]
        if not _INTEGER.fullmatch(text):
            raise ValidationError(INVALID_AMOUNT)
        amount = int(text)
        if not _INT64_MIN <= amount <= _INT64_MAX or amount <= 0:
            raise ValidationError(INVALID_AMOUNT)
        return amount