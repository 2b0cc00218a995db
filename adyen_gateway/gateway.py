"""Adyen gateway - starts payments and reconciles their status"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple

from adyen_gateway.adyen.config import GatewayConfig
from adyen_gateway.adyen.payment_methods import (
    PaymentMethod,
    PaymentMethodIDeal,
    PaymentMethodOther,
    PaymentMethodType,
)
from adyen_gateway.adyen.request_transformer import transform_payment_request
from adyen_gateway.adyen.requests import PaymentRequest, PaymentSessionRequest
from adyen_gateway.adyen.responses import PaymentResponse
from adyen_gateway.adyen.result_codes import ResultCode
from adyen_gateway.adyen.transformers import transform_amount
from adyen_gateway.domain.exceptions import AdyenAPIError
from adyen_gateway.domain.models import Modes, Payment, PaymentMethods, PaymentStatus
from adyen_gateway.infrastructure.clients.adyen import AdyenClient
from adyen_gateway.infrastructure.observability.logging import log_status_update
from adyen_gateway.infrastructure.observability.metrics import payment_flow_counter, record_status
from adyen_gateway.utils.locale_utils import country_code_from_locale

logger = logging.getLogger(__name__)

META_SDK_VERSION = "adyen_sdk_version"
META_PAYMENT_SESSION = "adyen_payment_session"

# Methods completed through the /payments API and a bank redirect,
# everything else goes through a Web SDK payment session
DIRECT_API_METHODS = frozenset({PaymentMethods.IDEAL, PaymentMethods.SOFORT})

CHECKOUT_SDK_URL = "https://checkoutshopper-{environment}.adyen.com/checkoutshopper/assets/js/sdk/checkoutSDK.{version}.min.js"


class Outcome(str, Enum):
    """Result of a gateway step"""

    COMPLETED = "completed"
    # Nothing to do at this stage, e.g. no payload on the return URL yet
    NOT_APPLICABLE = "not_applicable"
    FAILURE = "failure"


@dataclass(frozen=True)
class CheckoutContext:
    """What the checkout page needs to mount the Web SDK"""

    script_url: str
    payment_session: str
    environment: str
    sdk_version: str


def uses_direct_api(method: str | None) -> bool:
    return method in DIRECT_API_METHODS


class Gateway:
    """Adyen gateway for one configuration"""

    SLUG = "adyen"

    # https://docs.adyen.com/developers/checkout/web-sdk/release-notes-web-sdk
    SDK_VERSION = "1.9.2"

    def __init__(self, config: GatewayConfig, client: AdyenClient | None = None):
        self.config = config
        self.client = client
        self.error: AdyenAPIError | None = None

    def get_supported_payment_methods(self) -> List[str]:
        return [
            PaymentMethods.BANCONTACT,
            PaymentMethods.CREDIT_CARD,
            PaymentMethods.DIRECT_DEBIT,
            PaymentMethods.GIROPAY,
            PaymentMethods.IDEAL,
            PaymentMethods.MAESTRO,
            PaymentMethods.SOFORT,
        ]

    def get_locale(self, payment: Payment) -> str:
        if payment.customer is not None and payment.customer.locale:
            return payment.customer.locale

        return self.config.default_locale

    def get_country_code(self, payment: Payment) -> str | None:
        return country_code_from_locale(self.get_locale(payment), self.config.default_country)

    def _payment_url(self, payment: Payment, action: str) -> str:
        origin = self.config.origin_url.rstrip("/")
        return f"{origin}/{self.config.rest_namespace}/payments/{payment.id}/{action}"

    def pay_redirect_url(self, payment: Payment) -> str:
        """URL that renders the checkout page for the payment"""
        return self._payment_url(payment, "redirect")

    def return_url(self, payment: Payment) -> str:
        return payment.return_url or self._payment_url(payment, "return")

    def build_payment_request(self, payment: Payment, payment_method: PaymentMethod) -> PaymentRequest:
        request = PaymentRequest(
            amount=transform_amount(payment.total_amount),
            merchant_account=self.config.merchant_account,
            reference=str(payment.id),
            return_url=self.return_url(payment),
            payment_method=payment_method,
            country_code=self.get_country_code(payment),
        )

        return transform_payment_request(payment, request)

    def build_payment_session_request(self, payment: Payment) -> PaymentSessionRequest:
        request = PaymentSessionRequest(
            amount=transform_amount(payment.total_amount),
            merchant_account=self.config.merchant_account,
            reference=str(payment.id),
            return_url=self.return_url(payment),
            country_code=self.get_country_code(payment),
        )

        request = transform_payment_request(payment, request)

        # Take a leap of faith for unknown payment methods
        payment_method_type = PaymentMethodType.transform(payment.method)

        allowed_payment_methods = None

        if payment_method_type is not None:
            allowed_payment_methods = [_type_value(payment_method_type)]

        return request.with_fields(
            origin=self.config.origin_url,
            sdk_version=self.SDK_VERSION,
            allowed_payment_methods=allowed_payment_methods,
        )

    def build_start_request(self, payment: Payment) -> PaymentRequest | PaymentSessionRequest:
        """Request for starting the payment; the flow depends only on the payment method"""
        if not uses_direct_api(payment.method):
            return self.build_payment_session_request(payment)

        payment_method_type = _type_value(PaymentMethodType.transform(payment.method))

        if payment_method_type == PaymentMethodType.IDEAL.value:
            payment_method: PaymentMethod = PaymentMethodIDeal(issuer=payment.issuer or "")
        else:
            payment_method = PaymentMethodOther(type=payment_method_type)

        return self.build_payment_request(payment, payment_method)

    def _fail(self, payment: Payment, error: AdyenAPIError | None) -> Outcome:
        payment.status = PaymentStatus.FAILURE
        self.error = error
        record_status(PaymentStatus.FAILURE)
        return Outcome.FAILURE

    def _require_client(self) -> AdyenClient:
        if self.client is None:
            raise AdyenAPIError(f"No Adyen client for gateway configuration {self.config.config_id}")

        return self.client

    def start(self, payment: Payment) -> Outcome:
        """
        Start the payment at Adyen.

        iDEAL and Sofort go through the /payments API and redirect the
        shopper to the bank. All other methods get a Web SDK payment
        session which is rendered by payment_redirect().
        """
        try:
            request = self.build_start_request(payment)
        except ValueError as e:
            logger.warning(f"Could not build Adyen request for payment {payment.id}: {e}")
            return self._fail(payment, AdyenAPIError(f"Invalid payment data: {e}"))

        try:
            client = self._require_client()

            if isinstance(request, PaymentRequest):
                payment_flow_counter.labels(flow="api").inc()

                response = client.create_payment(request)

                payment.transaction_id = response.psp_reference

                if response.redirect is not None:
                    payment.action_url = response.redirect.url
            else:
                payment_flow_counter.labels(flow="session").inc()

                session_response = client.create_payment_session(request)

                payment.action_url = self.pay_redirect_url(payment)

                payment.set_meta(META_SDK_VERSION, self.SDK_VERSION)
                payment.set_meta(META_PAYMENT_SESSION, session_response.payment_session)

        except AdyenAPIError as e:
            logger.error(f"Adyen error starting payment {payment.id}: {e}")
            return self._fail(payment, e)

        return Outcome.COMPLETED

    def create_payment(self, payment: Payment, payment_method: PaymentMethod) -> PaymentResponse | None:
        """
        Create a payment for a payment method chosen in the Web SDK.

        Returns None when Adyen could not be reached or rejected the request;
        the payment is then marked as failed and the error kept on the gateway.
        """
        try:
            request = self.build_payment_request(payment, payment_method)
        except ValueError as e:
            logger.warning(f"Could not build Adyen request for payment {payment.id}: {e}")
            self._fail(payment, AdyenAPIError(f"Invalid payment data: {e}"))
            return None

        try:
            response = self._require_client().create_payment(request)
        except AdyenAPIError as e:
            logger.error(f"Adyen error creating payment {payment.id}: {e}")
            self._fail(payment, e)
            return None

        if response.psp_reference is not None:
            payment.transaction_id = response.psp_reference

        status = ResultCode.transform(response.result_code)

        if status is not None:
            payment.status = status
            record_status(status)

        return response

    def payment_redirect(self, payment: Payment) -> Tuple[Outcome, CheckoutContext | None]:
        """Checkout page context for a payment session, if the payment has one"""
        sdk_version = payment.get_meta(META_SDK_VERSION)
        payment_session = payment.get_meta(META_PAYMENT_SESSION)

        if not sdk_version or not payment_session:
            return Outcome.NOT_APPLICABLE, None

        environment = "test" if payment.mode == Modes.TEST else "live"

        context = CheckoutContext(
            script_url=CHECKOUT_SDK_URL.format(environment=environment, version=sdk_version),
            payment_session=payment_session,
            environment=environment,
            sdk_version=sdk_version,
        )

        return Outcome.COMPLETED, context

    def update_status(self, payment: Payment, query: Mapping[str, str]) -> Outcome:
        """
        Reconcile the payment status from the payload Adyen appends to the return URL.

        Without a payload there is nothing to reconcile yet.
        """
        payload = query.get("payload")

        if payload is None:
            return Outcome.NOT_APPLICABLE

        if self.client is None:
            return self._fail(payment, AdyenAPIError(f"No Adyen client for gateway configuration {self.config.config_id}"))

        if uses_direct_api(payment.method):
            result = self.client.get_payment_details(payload)
        else:
            result = self.client.get_payment_result(payload)

        status = None
        result_code = None

        if result is not None:
            result_code = result.result_code
            status = ResultCode.transform(result_code)

        if status is None:
            if result is not None:
                logger.warning(f"Unknown Adyen result code {result_code!r} for payment {payment.id}")

            outcome = self._fail(payment, self.client.get_error())
            log_status_update(payment.id, result_code, payment.status, outcome.value)
            return outcome

        payment.status = status
        record_status(status)

        if result.psp_reference is not None:
            payment.transaction_id = result.psp_reference

        log_status_update(payment.id, result_code, status, Outcome.COMPLETED.value)

        return Outcome.COMPLETED

    def get_available_payment_methods(self) -> List[str]:
        """Generic payment methods active for the merchant account"""
        if self.client is None:
            return []

        methods = self.client.get_payment_methods()

        if not methods:
            self.error = self.client.get_error()
            return []

        payment_methods: List[str] = []

        for method in methods:
            payment_method = PaymentMethodType.transform_gateway_method(method)

            if payment_method is not None and payment_method not in payment_methods:
                payment_methods.append(payment_method)

        return payment_methods

    def get_issuers(self) -> List[Dict[str, Any]]:
        """iDEAL issuers as option groups"""
        if self.client is None:
            return []

        issuers = self.client.get_issuers(PaymentMethodType.IDEAL.value)

        if not issuers:
            self.error = self.client.get_error()
            return []

        return [{"options": issuers}]


def _type_value(payment_method_type: PaymentMethodType | str | None) -> str | None:
    if isinstance(payment_method_type, PaymentMethodType):
        return payment_method_type.value

    return payment_method_type


class GatewayRegistry:
    """Gateways by configuration id"""

    def __init__(self, gateways: Mapping[int, Gateway] | None = None):
        self._gateways: Dict[int, Gateway] = dict(gateways or {})

    def register(self, gateway: Gateway) -> None:
        self._gateways[gateway.config.config_id] = gateway

    def get(self, config_id: int | None) -> Gateway | None:
        if config_id is None:
            return None

        return self._gateways.get(config_id)

    def close(self) -> None:
        for gateway in self._gateways.values():
            if gateway.client is not None:
                gateway.client.close()
