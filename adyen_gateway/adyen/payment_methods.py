"""Adyen payment method types and payment method objects"""

from enum import Enum
from typing import Any, Literal, Mapping

from pydantic import ConfigDict, Field

from adyen_gateway.adyen.models import AdyenModel
from adyen_gateway.domain.models import PaymentMethods


class PaymentMethodType(str, Enum):
    """Adyen payment method type identifiers"""

    APPLE_PAY = "applepay"
    BANCONTACT = "bcmc"
    DIRECT_DEBIT = "sepadirectdebit"
    EPS = "eps"
    GIROPAY = "giropay"
    GOOGLE_PAY = "paywithgoogle"
    IDEAL = "ideal"
    MAESTRO = "maestro"
    PAYPAL = "paypal"
    SCHEME = "scheme"
    SOFORT = "directEbanking"

    @classmethod
    def transform(cls, method: str | None) -> "PaymentMethodType | str | None":
        """
        Transform a generic payment method to an Adyen payment method type.

        Unknown methods are returned unchanged so new Adyen methods can be
        used before they are mapped here.
        """
        if method is None:
            return None

        return _GENERIC_TO_ADYEN.get(method, method)

    @classmethod
    def transform_gateway_method(cls, method: str | None) -> str | None:
        """Transform an Adyen payment method type to a generic payment method"""
        if method is None:
            return None

        return _ADYEN_TO_GENERIC.get(method)


_GENERIC_TO_ADYEN = {
    PaymentMethods.APPLE_PAY: PaymentMethodType.APPLE_PAY,
    PaymentMethods.BANCONTACT: PaymentMethodType.BANCONTACT,
    PaymentMethods.CREDIT_CARD: PaymentMethodType.SCHEME,
    PaymentMethods.DIRECT_DEBIT: PaymentMethodType.DIRECT_DEBIT,
    PaymentMethods.EPS: PaymentMethodType.EPS,
    PaymentMethods.GIROPAY: PaymentMethodType.GIROPAY,
    PaymentMethods.GOOGLE_PAY: PaymentMethodType.GOOGLE_PAY,
    PaymentMethods.IDEAL: PaymentMethodType.IDEAL,
    PaymentMethods.MAESTRO: PaymentMethodType.MAESTRO,
    PaymentMethods.PAYPAL: PaymentMethodType.PAYPAL,
    PaymentMethods.SOFORT: PaymentMethodType.SOFORT,
}

# Keyed on the plain string value, Adyen sends raw strings
_ADYEN_TO_GENERIC = {adyen.value: generic for generic, adyen in _GENERIC_TO_ADYEN.items()}


class PaymentMethod(AdyenModel):
    """Base for the payment method object sent in a payment request"""

    type: str


class PaymentMethodIDeal(PaymentMethod):
    type: Literal["ideal"] = "ideal"
    issuer: str = Field(..., min_length=1)


class PaymentMethodSepaDirectDebit(PaymentMethod):
    type: Literal["sepadirectdebit"] = "sepadirectdebit"
    iban: str = Field(..., alias="sepa.ibanNumber", min_length=1)
    owner_name: str = Field(..., alias="sepa.ownerName", min_length=1)


class PaymentMethodOther(PaymentMethod):
    """Any other method type; submitted fields are forwarded verbatim"""

    model_config = ConfigDict(extra="allow")


def payment_method_from_dict(data: Mapping[str, Any]) -> PaymentMethod:
    """
    Resolve a raw payment method object to its payment method variant.

    Raises:
        pydantic.ValidationError: when required fields for the type are missing
    """
    method_type = data.get("type")

    if method_type == PaymentMethodType.DIRECT_DEBIT.value:
        return PaymentMethodSepaDirectDebit.model_validate(data)

    if method_type == PaymentMethodType.IDEAL.value:
        return PaymentMethodIDeal.model_validate(data)

    return PaymentMethodOther.model_validate(data)
