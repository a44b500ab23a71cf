"""Processing of individual payment requests."""

from __future__ import annotations

import logging
import threading

from payproc.protocol import (
    ACCEPTED,
    ASYNC_AMOUNT_LIMIT,
    MAX_PROCESSING_MS,
    REJECTED,
    REQUEST_CANCELLED,
    TRANSACTION_PROCESSED,
    Validator,
    format_response,
)

logger = logging.getLogger(__name__)


class RequestHandler:
    """Validates a request and simulates processing it.

    Amounts above the asynchronous limit take that many milliseconds to
    process (capped at the maximum processing time); setting ``shutdown``
    cancels such a request early.
    """

    def __init__(self, shutdown: threading.Event, validator: Validator) -> None:
        self.shutdown = shutdown
        self.validator = validator

    def handle_request(self, request: str) -> str:
        """Return the response line for ``request``."""
        try:
            amount = self.validator.validate(request)
        except ValueError as exc:
            return format_response(REJECTED, str(exc))

        if amount > ASYNC_AMOUNT_LIMIT:
            processing_ms = min(amount, MAX_PROCESSING_MS)
            if self.shutdown.wait(processing_ms / 1000):
                logger.info(
                    "Server||Active Request: %s||Terminating request due to external signal.",
                    request,
                )
                return format_response(REJECTED, REQUEST_CANCELLED)

        return format_response(ACCEPTED, TRANSACTION_PROCESSED)