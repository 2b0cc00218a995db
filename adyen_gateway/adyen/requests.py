"""Adyen payment and payment session requests"""

from typing import List, TypeVar

from pydantic import Field, SerializeAsAny

from adyen_gateway.adyen.models import Address, AdyenModel, Amount, Channel, LineItem, Name
from adyen_gateway.adyen.payment_methods import PaymentMethod

RequestT = TypeVar("RequestT", bound="AbstractPaymentRequest")


class AbstractPaymentRequest(AdyenModel):
    """Fields shared by the /payments and /paymentSession requests"""

    amount: Amount
    merchant_account: str
    reference: str
    return_url: str
    country_code: str | None = None
    channel: Channel | None = None
    shopper_ip: str | None = Field(default=None, alias="shopperIP")
    shopper_locale: str | None = None
    shopper_reference: str | None = None
    shopper_statement: str | None = None
    telephone_number: str | None = None
    shopper_name: Name | None = None
    date_of_birth: str | None = None
    billing_address: Address | None = None
    delivery_address: Address | None = None
    line_items: List[LineItem] | None = None

    def with_fields(self: RequestT, **fields) -> RequestT:
        """
        Return a validated copy of the same request type with the given
        fields replaced.

        Raises:
            pydantic.ValidationError: when a replaced value is invalid
        """
        return type(self).model_validate({**dict(self), **fields})


class PaymentRequest(AbstractPaymentRequest):
    """
    Request for the /payments endpoint.

    https://docs.adyen.com/api-explorer/#/PaymentSetupAndVerificationService/v41/payments
    """

    payment_method: SerializeAsAny[PaymentMethod]


class PaymentSessionRequest(AbstractPaymentRequest):
    """
    Request for the /paymentSession endpoint used by the Web SDK.

    https://docs.adyen.com/api-explorer/#/PaymentSetupAndVerificationService/v41/paymentSession
    """

    origin: str | None = None
    sdk_version: str | None = None
    allowed_payment_methods: List[str] | None = None
