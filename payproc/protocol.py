"""Wire format, processing limits and the interfaces shared by the payment processor."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

# Requests whose amount is greater than this are processed with a simulated delay.
ASYNC_AMOUNT_LIMIT = 100
# Port the server listens on.
LISTENER_PORT = 8080
# Upper bound, in milliseconds, on the simulated processing time of one request.
MAX_PROCESSING_MS = 10_000
# Seconds the server waits for the next request line on a connection.
READ_TIMEOUT = 4.0
# Seconds active requests are given to complete once shutdown begins.
ACTIVE_REQUEST_GRACE = 3.0

ACCEPTED = "ACCEPTED"
REJECTED = "REJECTED"
REQUEST_CANCELLED = "Request cancelled"
INVALID_REQUEST = "Invalid request"
INVALID_AMOUNT = "Invalid amount"
TRANSACTION_PROCESSED = "Transaction processed"
SEPARATOR = "|"
PAYMENT_MARKER = "PAYMENT"
RESPONSE_MARKER = "RESPONSE"


@runtime_checkable
class Validator(Protocol):
    """Checks a raw request and extracts the payment amount."""

    def validate(self, request: str) -> int:
        """Return the amount carried by ``request``; raise ``ValueError`` if it is invalid."""
        ...


@runtime_checkable
class RequestHandlerProtocol(Protocol):
    """Turns one request line into one response line."""

    def handle_request(self, request: str) -> str:
        """Process ``request`` and return the response text."""
        ...


def format_response(marker: str, detail: str) -> str:
    """Build a response line such as ``RESPONSE|ACCEPTED|Transaction processed``."""
    return SEPARATOR.join((RESPONSE_MARKER, marker, detail))


def payment_request(amount: object) -> str:
    """Build a payment request line such as ``PAYMENT|10``."""
    return f"{PAYMENT_MARKER}{SEPARATOR}{amount}"