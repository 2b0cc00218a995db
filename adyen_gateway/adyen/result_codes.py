"""
Adyen payment result codes.

https://docs.adyen.com/developers/checkout/payment-result-codes
"""

from enum import Enum

from adyen_gateway.domain.models import PaymentStatus


class ResultCode(str, Enum):
    # The payment was successfully authorised.
    AUTHORISED = "Authorised"

    # The payment was cancelled (by either the shopper or the merchant)
    # before processing was completed.
    CANCELLED = "Cancelled"

    # There was an error when the payment was being processed.
    ERROR = "Error"

    # Final status not yet available, common for asynchronous methods
    # such as iDEAL.
    PENDING = "Pending"

    # Part of the standard flow for methods such as SEPA Direct Debit.
    RECEIVED = "Received"

    # The shopper needs to be redirected to complete the payment.
    REDIRECT_SHOPPER = "redirectShopper"

    # The payment was refused.
    REFUSED = "Refused"

    @classmethod
    def transform(cls, result_code: str | None) -> str | None:
        """
        Transform an Adyen result code to a generic payment status.

        Returns None for codes outside the known set.
        """
        try:
            code = cls(result_code)
        except ValueError:
            return None

        return _STATUSES[code]


_STATUSES = {
    ResultCode.PENDING: PaymentStatus.OPEN,
    ResultCode.RECEIVED: PaymentStatus.OPEN,
    ResultCode.REDIRECT_SHOPPER: PaymentStatus.OPEN,
    ResultCode.CANCELLED: PaymentStatus.CANCELLED,
    ResultCode.ERROR: PaymentStatus.FAILURE,
    ResultCode.REFUSED: PaymentStatus.FAILURE,
    ResultCode.AUTHORISED: PaymentStatus.SUCCESS,
}
