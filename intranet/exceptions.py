"""
Domain exceptions raised by the service layer.

Each exception carries a stable ``code`` from ``intranet.error_codes`` and
a human-readable message.  ``intranet.main`` turns them into JSON error
responses; ``NotFoundError`` maps to 404, everything else to 400.
"""


class DomainError(Exception):
    status_code: int = 400

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class ValidationError(DomainError):
    pass


class NotFoundError(DomainError):
    status_code = 404


class EventError(DomainError):
    """Event rule violation.  ``str(exc)`` is the error code itself."""

    def __init__(self, code: str) -> None:
        super().__init__(code, code)


class LotteryError(DomainError):
    pass


class EmailDeliveryError(Exception):
    """Raised by the mailer when a message could not be handed to SES."""
