"""Adyen Checkout API HTTP client"""

import logging
from typing import Any, Dict, Type, TypeVar

import httpx
from pydantic import ValidationError

from adyen_gateway.adyen.config import GatewayConfig
from adyen_gateway.adyen.payment_methods import PaymentMethodType
from adyen_gateway.adyen.requests import PaymentRequest, PaymentSessionRequest
from adyen_gateway.adyen.responses import (
    AdyenResponse,
    ErrorResponse,
    PaymentResponse,
    PaymentResult,
    PaymentSessionResponse,
)
from adyen_gateway.config import settings
from adyen_gateway.domain.exceptions import AdyenAPIError
from adyen_gateway.infrastructure.observability.metrics import adyen_latency_histogram, adyen_request_counter

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=AdyenResponse)


class AdyenClient:
    """
    Client for the Adyen Checkout API.

    Creating payments and payment sessions raises AdyenAPIError. The lookup
    calls return None on failure and keep the error for get_error().
    """

    def __init__(
        self,
        config: GatewayConfig,
        http_client: httpx.Client | None = None,
        timeout: float | None = None,
    ):
        self.config = config
        self.timeout = timeout or settings.http_timeout_seconds
        self.http_client = http_client or httpx.Client(timeout=self.timeout)
        self.error: AdyenAPIError | None = None

    def get_error(self) -> AdyenAPIError | None:
        """Error of the last failed call"""
        return self.error

    def close(self) -> None:
        self.http_client.close()

    def _send_request(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a JSON payload to a Checkout API endpoint.

        Raises:
            AdyenAPIError: On timeout, transport errors, HTTP errors or invalid response
        """
        self.error = None
        url = f"{self.config.api_base_url}/{endpoint}"

        try:
            with adyen_latency_histogram.labels(endpoint=endpoint).time():
                response = self.http_client.post(
                    url,
                    json=payload,
                    headers={"X-API-Key": self.config.api_key},
                )

            if response.is_error:
                raise self._error_from_response(response)

            try:
                data = response.json()
            except ValueError as e:
                raise AdyenAPIError(f"Invalid JSON response from Adyen: {e}") from e

            if not isinstance(data, dict):
                raise AdyenAPIError("Unexpected response from Adyen, expected an object")

        except httpx.TimeoutException as e:
            adyen_request_counter.labels(endpoint=endpoint, outcome="error").inc()
            raise AdyenAPIError(f"Adyen API timeout after {self.timeout}s") from e
        except httpx.RequestError as e:
            adyen_request_counter.labels(endpoint=endpoint, outcome="error").inc()
            raise AdyenAPIError(f"Adyen API request failed: {e}") from e
        except AdyenAPIError:
            adyen_request_counter.labels(endpoint=endpoint, outcome="error").inc()
            raise

        adyen_request_counter.labels(endpoint=endpoint, outcome="success").inc()

        return data

    @staticmethod
    def _error_from_response(response: httpx.Response) -> AdyenAPIError:
        try:
            error = ErrorResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            return AdyenAPIError(f"Adyen API error: {response.status_code}", status=response.status_code)

        return AdyenAPIError(
            error.message or f"Adyen API error: {response.status_code}",
            status=error.status or response.status_code,
            error_code=error.error_code,
            error_type=error.error_type,
        )

    @staticmethod
    def _parse(model: Type[ResponseT], data: Dict[str, Any]) -> ResponseT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise AdyenAPIError(f"Invalid {model.__name__} from Adyen: {e}") from e

    def _request_or_none(self, endpoint: str, payload: Dict[str, Any], model: Type[ResponseT]) -> ResponseT | None:
        try:
            return self._parse(model, self._send_request(endpoint, payload))
        except AdyenAPIError as e:
            logger.warning(f"Adyen {endpoint} failed: {e}")
            self.error = e
            return None

    def create_payment(self, request: PaymentRequest) -> PaymentResponse:
        """
        Create a payment through the /payments endpoint.

        Raises:
            AdyenAPIError: When Adyen rejects the request or is unavailable
        """
        return self._parse(PaymentResponse, self._send_request("payments", request.get_json()))

    def create_payment_session(self, request: PaymentSessionRequest) -> PaymentSessionResponse:
        """
        Create a Web SDK payment session.

        Raises:
            AdyenAPIError: When Adyen rejects the request or is unavailable
        """
        return self._parse(PaymentSessionResponse, self._send_request("paymentSession", request.get_json()))

    def get_payment_details(self, payload: str) -> PaymentResult | None:
        """Result of a payment after the shopper returned from a redirect"""
        return self._request_or_none("payments/details", {"details": {"payload": payload}}, PaymentResult)

    def get_payment_result(self, payload: str) -> PaymentResult | None:
        """Result of a payment made through the Web SDK"""
        return self._request_or_none("payments/result", {"payload": payload}, PaymentResult)

    def get_payment_methods(self) -> Dict[str, Dict[str, Any]] | None:
        """Payment methods active for the merchant account, keyed by type"""
        try:
            data = self._send_request("paymentMethods", {"merchantAccount": self.config.merchant_account})
        except AdyenAPIError as e:
            logger.warning(f"Adyen paymentMethods failed: {e}")
            self.error = e
            return None

        methods = data.get("paymentMethods")

        if not isinstance(methods, list):
            self.error = AdyenAPIError("No payment methods in Adyen response")
            return None

        try:
            return {method["type"]: method for method in methods if isinstance(method, dict) and "type" in method}
        except TypeError as e:
            self.error = AdyenAPIError(f"Invalid payment methods from Adyen: {e}")
            return None

    def get_issuers(self, payment_method: str = PaymentMethodType.IDEAL.value) -> Dict[str, str] | None:
        """Issuers for a payment method as {issuer id: name}"""
        methods = self.get_payment_methods()

        if methods is None:
            return None

        method = methods.get(payment_method)

        if method is None:
            self.error = AdyenAPIError(f"Payment method {payment_method} is not available")
            return None

        # Newer API versions list issuers directly, older ones as a select detail
        try:
            items = method.get("issuers")

            if items is None:
                items = next(
                    (detail.get("items") for detail in method.get("details", []) if detail.get("key") == "issuer"),
                    None,
                )

            if not items:
                self.error = AdyenAPIError(f"No issuers for payment method {payment_method}")
                return None

            return {item["id"]: item["name"] for item in items}
        except (KeyError, TypeError, AttributeError) as e:
            self.error = AdyenAPIError(f"Invalid issuers from Adyen: {e}")
            return None
