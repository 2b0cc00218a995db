"""Adyen Checkout API responses"""

from typing import Any, Dict

from pydantic import ConfigDict

from adyen_gateway.adyen.models import AdyenModel


class AdyenResponse(AdyenModel):
    # Adyen adds fields over time; keep whatever we are sent
    model_config = ConfigDict(extra="allow")


class Redirect(AdyenResponse):
    url: str
    method: str | None = None
    data: Dict[str, Any] | None = None


class PaymentResponse(AdyenResponse):
    """Response of the /payments endpoint"""

    result_code: str | None = None
    psp_reference: str | None = None
    refusal_reason: str | None = None
    # Opaque follow-up action for the Web SDK component
    action: Dict[str, Any] | None = None
    redirect: Redirect | None = None


class PaymentSessionResponse(AdyenResponse):
    """Response of the /paymentSession endpoint"""

    payment_session: str


class PaymentResult(AdyenResponse):
    """Response of the /payments/details and /payments/result endpoints"""

    result_code: str | None = None
    psp_reference: str | None = None
    merchant_reference: str | None = None
    payment_method: str | Dict[str, Any] | None = None


class ErrorResponse(AdyenResponse):
    status: int | None = None
    error_code: str | None = None
    message: str | None = None
    error_type: str | None = None
