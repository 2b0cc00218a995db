"""Domain-specific exceptions"""

from typing import Any


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AdyenAPIError(DomainException):
    """Adyen Checkout API returned an error or is unavailable"""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        error_code: str | None = None,
        error_type: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.error_code = error_code
        self.error_type = error_type

    def __str__(self) -> str:
        if self.error_code:
            return f"{self.error_code}: {self.message}"
        return self.message


class PaymentsControllerError(DomainException):
    """Submitted payment method could not be processed"""

    def __init__(self, code: str, message: str, status_code: int = 400, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.data = data
