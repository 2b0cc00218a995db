"""Unit tests for flow selection, starting payments and status reconciliation"""

import httpx
import pytest
from unittest.mock import MagicMock

from adyen_gateway.adyen.payment_methods import PaymentMethodOther, PaymentMethodSepaDirectDebit
from adyen_gateway.adyen.requests import PaymentRequest, PaymentSessionRequest
from adyen_gateway.adyen.responses import PaymentResponse, PaymentResult, PaymentSessionResponse, Redirect
from adyen_gateway.domain.exceptions import AdyenAPIError
from adyen_gateway.domain.models import Customer, Modes, PaymentMethods, PaymentStatus
from adyen_gateway.gateway import META_PAYMENT_SESSION, META_SDK_VERSION, Gateway, GatewayRegistry, Outcome
from adyen_gateway.infrastructure.clients.adyen import AdyenClient


# Flow selection


@pytest.mark.parametrize("method", [PaymentMethods.IDEAL, PaymentMethods.SOFORT])
def test_direct_api_flow(gateway: Gateway, make_payment, method):
    request = gateway.build_start_request(make_payment(method=method))

    assert isinstance(request, PaymentRequest)


@pytest.mark.parametrize(
    "method",
    [PaymentMethods.CREDIT_CARD, PaymentMethods.BANCONTACT, PaymentMethods.DIRECT_DEBIT, "klarna_paynow", None],
)
def test_hosted_session_flow(gateway: Gateway, make_payment, method):
    request = gateway.build_start_request(make_payment(method=method))

    assert isinstance(request, PaymentSessionRequest)
    assert request.sdk_version == Gateway.SDK_VERSION
    assert request.origin == "https://shop.example.com"


def test_session_allowed_methods(gateway: Gateway, make_payment):
    card = gateway.build_start_request(make_payment(method=PaymentMethods.CREDIT_CARD))
    unknown = gateway.build_start_request(make_payment(method="klarna_paynow"))
    unset = gateway.build_start_request(make_payment(method=None))

    assert card.allowed_payment_methods == ["scheme"]
    assert unknown.allowed_payment_methods == ["klarna_paynow"]
    assert not unset.allowed_payment_methods


def test_ideal_request_end_to_end(gateway: Gateway, make_payment):
    """iDEAL €10.00 payment 1001 with issuer ABC"""
    request = gateway.build_start_request(make_payment())

    data = request.get_json()

    assert data["amount"] == {"currency": "EUR", "value": 1000}
    assert data["paymentMethod"] == {"type": "ideal", "issuer": "ABC"}
    assert data["reference"] == "1001"
    assert data["returnUrl"] == "https://x/r"
    assert data["merchantAccount"] == "YOUR_MERCHANT_ACCOUNT"


def test_sofort_request_method(gateway: Gateway, make_payment):
    request = gateway.build_start_request(make_payment(method=PaymentMethods.SOFORT, issuer=None))

    assert request.get_json()["paymentMethod"] == {"type": "directEbanking"}


def test_country_code_from_customer_locale(gateway: Gateway, make_payment):
    request = gateway.build_start_request(make_payment(customer=Customer(locale="de_DE")))

    assert request.country_code == "DE"


def test_country_code_falls_back_to_default_locale(gateway: Gateway, make_payment):
    request = gateway.build_start_request(make_payment(customer=None))

    assert request.country_code == "NL"


def test_return_url_defaults_to_gateway_return(gateway: Gateway, make_payment):
    request = gateway.build_start_request(make_payment(return_url=None))

    assert request.return_url == "https://shop.example.com/adyen/v1/payments/1001/return"


# Start


def test_start_direct_api(gateway: Gateway, adyen_client: MagicMock, make_payment):
    adyen_client.create_payment.return_value = PaymentResponse(
        result_code="redirectShopper",
        psp_reference="8815000000000001",
        redirect=Redirect(url="https://test.adyen.com/hpp/redirectIdeal.shtml", method="GET"),
    )
    payment = make_payment()

    outcome = gateway.start(payment)

    assert outcome == Outcome.COMPLETED
    assert payment.transaction_id == "8815000000000001"
    assert payment.action_url == "https://test.adyen.com/hpp/redirectIdeal.shtml"
    adyen_client.create_payment.assert_called_once()
    adyen_client.create_payment_session.assert_not_called()


def test_start_direct_api_without_redirect(gateway: Gateway, adyen_client: MagicMock, make_payment):
    adyen_client.create_payment.return_value = PaymentResponse(result_code="Pending", psp_reference="881")
    payment = make_payment()

    gateway.start(payment)

    assert payment.transaction_id == "881"
    assert payment.action_url is None


def test_start_hosted_session(gateway: Gateway, adyen_client: MagicMock, make_payment):
    adyen_client.create_payment_session.return_value = PaymentSessionResponse(payment_session="eyJjaGVja291dHNob3BwZXJCYXNl")
    payment = make_payment(method=PaymentMethods.CREDIT_CARD)

    outcome = gateway.start(payment)

    assert outcome == Outcome.COMPLETED
    assert payment.action_url == "https://shop.example.com/adyen/v1/payments/1001/redirect"
    assert payment.get_meta(META_SDK_VERSION) == "1.9.2"
    assert payment.get_meta(META_PAYMENT_SESSION) == "eyJjaGVja291dHNob3BwZXJCYXNl"

    request = adyen_client.create_payment_session.call_args.args[0]
    assert request.allowed_payment_methods == ["scheme"]


def test_start_provider_error_marks_failure(gateway: Gateway, adyen_client: MagicMock, make_payment):
    error = AdyenAPIError("Required field 'issuer' is not provided.", status=422, error_code="14_006")
    adyen_client.create_payment.side_effect = error
    payment = make_payment()

    outcome = gateway.start(payment)

    assert outcome == Outcome.FAILURE
    assert payment.status == PaymentStatus.FAILURE
    assert gateway.error is error


def test_start_ideal_without_issuer(gateway: Gateway, adyen_client: MagicMock, make_payment):
    payment = make_payment(issuer=None)

    assert gateway.start(payment) == Outcome.FAILURE
    assert payment.status == PaymentStatus.FAILURE
    adyen_client.create_payment.assert_not_called()


def test_start_without_client(gateway_config, make_payment):
    gateway = Gateway(gateway_config, client=None)
    payment = make_payment(method=PaymentMethods.CREDIT_CARD)

    assert gateway.start(payment) == Outcome.FAILURE
    assert payment.status == PaymentStatus.FAILURE
    assert gateway.error is not None


# Redirect


def test_payment_redirect_not_applicable(gateway: Gateway, make_payment):
    payment = make_payment()
    payment.set_meta(META_SDK_VERSION, "1.9.2")

    assert gateway.payment_redirect(payment) == (Outcome.NOT_APPLICABLE, None)


@pytest.mark.parametrize("mode, environment", [(Modes.TEST, "test"), (Modes.LIVE, "live")])
def test_payment_redirect_context(gateway: Gateway, make_payment, mode, environment):
    payment = make_payment(mode=mode)
    payment.set_meta(META_SDK_VERSION, "1.9.2")
    payment.set_meta(META_PAYMENT_SESSION, "session-token")

    outcome, context = gateway.payment_redirect(payment)

    assert outcome == Outcome.COMPLETED
    assert context.script_url == (
        f"https://checkoutshopper-{environment}.adyen.com/checkoutshopper/assets/js/sdk/checkoutSDK.1.9.2.min.js"
    )
    assert context.payment_session == "session-token"
    assert context.environment == environment


# Status reconciliation


def test_update_status_without_payload_is_noop(gateway: Gateway, adyen_client: MagicMock, make_payment):
    payment = make_payment(status=PaymentStatus.OPEN, transaction_id="881")

    outcome = gateway.update_status(payment, {})

    assert outcome == Outcome.NOT_APPLICABLE
    assert payment.status == PaymentStatus.OPEN
    assert payment.transaction_id == "881"
    adyen_client.get_payment_details.assert_not_called()
    adyen_client.get_payment_result.assert_not_called()


def test_update_status_direct_api_uses_details(gateway: Gateway, adyen_client: MagicMock, make_payment):
    adyen_client.get_payment_details.return_value = PaymentResult(result_code="Authorised", psp_reference="8815")
    payment = make_payment(method=PaymentMethods.IDEAL)

    outcome = gateway.update_status(payment, {"payload": "Ab02b4c0!BQABAgA"})

    assert outcome == Outcome.COMPLETED
    assert payment.status == PaymentStatus.SUCCESS
    assert payment.transaction_id == "8815"
    adyen_client.get_payment_details.assert_called_once_with("Ab02b4c0!BQABAgA")
    adyen_client.get_payment_result.assert_not_called()


def test_update_status_session_uses_result(gateway: Gateway, adyen_client: MagicMock, make_payment):
    adyen_client.get_payment_result.return_value = PaymentResult(result_code="Cancelled")
    payment = make_payment(method=PaymentMethods.CREDIT_CARD, transaction_id="original")

    outcome = gateway.update_status(payment, {"payload": "xyz"})

    assert outcome == Outcome.COMPLETED
    assert payment.status == PaymentStatus.CANCELLED
    assert payment.transaction_id == "original"
    adyen_client.get_payment_result.assert_called_once_with("xyz")


def test_update_status_no_result_is_failure(gateway: Gateway, adyen_client: MagicMock, make_payment):
    error = AdyenAPIError("Invalid payload", status=422, error_code="101")
    adyen_client.get_payment_details.return_value = None
    adyen_client.get_error.return_value = error
    payment = make_payment()

    outcome = gateway.update_status(payment, {"payload": "bad"})

    assert outcome == Outcome.FAILURE
    assert payment.status == PaymentStatus.FAILURE
    assert gateway.error is error


def test_update_status_unmapped_code_is_failure(gateway: Gateway, adyen_client: MagicMock, make_payment):
    adyen_client.get_payment_details.return_value = PaymentResult(result_code="SomethingNew", psp_reference="8815")
    adyen_client.get_error.return_value = None
    payment = make_payment(transaction_id="original")

    outcome = gateway.update_status(payment, {"payload": "p"})

    assert outcome == Outcome.FAILURE
    assert payment.status == PaymentStatus.FAILURE
    assert payment.transaction_id == "original"


# Create payment from submitted state data


def test_create_payment_with_sepa(gateway: Gateway, adyen_client: MagicMock, make_payment):
    adyen_client.create_payment.return_value = PaymentResponse(result_code="Received", psp_reference="8815000000000002")
    payment = make_payment(method=PaymentMethods.DIRECT_DEBIT)
    method = PaymentMethodSepaDirectDebit(iban="NL00BANK0123456789", owner_name="J Doe")

    response = gateway.create_payment(payment, method)

    assert response.result_code == "Received"
    assert payment.transaction_id == "8815000000000002"
    assert payment.status == PaymentStatus.OPEN

    request = adyen_client.create_payment.call_args.args[0]
    assert request.get_json()["paymentMethod"] == {
        "type": "sepadirectdebit",
        "sepa.ibanNumber": "NL00BANK0123456789",
        "sepa.ownerName": "J Doe",
    }


def test_create_payment_provider_error(gateway: Gateway, adyen_client: MagicMock, make_payment):
    adyen_client.create_payment.side_effect = AdyenAPIError("Adyen API timeout after 10.0s")
    payment = make_payment(method=PaymentMethods.CREDIT_CARD)

    response = gateway.create_payment(payment, PaymentMethodOther(type="scheme"))

    assert response is None
    assert payment.status == PaymentStatus.FAILURE
    assert str(gateway.error) == "Adyen API timeout after 10.0s"


# Account queries


def test_available_payment_methods(gateway: Gateway, adyen_client: MagicMock):
    adyen_client.get_payment_methods.return_value = {
        "scheme": {"type": "scheme", "name": "Credit Card"},
        "unknown_method_x": {"type": "unknown_method_x"},
    }

    assert gateway.get_available_payment_methods() == [PaymentMethods.CREDIT_CARD]


def test_available_payment_methods_deduplicates(gateway: Gateway, adyen_client: MagicMock):
    adyen_client.get_payment_methods.return_value = {"ideal": {}, "scheme": {}, "directEbanking": {}}

    methods = gateway.get_available_payment_methods()

    assert methods == [PaymentMethods.IDEAL, PaymentMethods.CREDIT_CARD, PaymentMethods.SOFORT]
    assert len(methods) == len(set(methods))


def test_available_payment_methods_failure(gateway: Gateway, adyen_client: MagicMock):
    error = AdyenAPIError("Adyen API error: 401", status=401)
    adyen_client.get_payment_methods.return_value = None
    adyen_client.get_error.return_value = error

    assert gateway.get_available_payment_methods() == []
    assert gateway.error is error


def test_issuers(gateway: Gateway, adyen_client: MagicMock):
    adyen_client.get_issuers.return_value = {"1121": "Test Issuer"}

    assert gateway.get_issuers() == [{"options": {"1121": "Test Issuer"}}]
    adyen_client.get_issuers.assert_called_once_with("ideal")


def test_issuers_failure(gateway: Gateway, adyen_client: MagicMock):
    adyen_client.get_issuers.return_value = None
    adyen_client.get_error.return_value = AdyenAPIError("boom")

    assert gateway.get_issuers() == []
    assert str(gateway.error) == "boom"


def test_supported_payment_methods(gateway: Gateway):
    methods = gateway.get_supported_payment_methods()

    assert PaymentMethods.IDEAL in methods
    assert PaymentMethods.SOFORT in methods
    assert PaymentMethods.PAYPAL not in methods


def test_registry(gateway: Gateway, adyen_client: MagicMock):
    registry = GatewayRegistry()
    registry.register(gateway)

    assert registry.get(1) is gateway
    assert registry.get(2) is None
    assert registry.get(None) is None

    registry.close()

    adyen_client.close.assert_called_once()


def test_malformed_account_data_gives_empty_lists(gateway_config):
    bodies = iter(
        [
            {"paymentMethods": [{"type": ["scheme"]}]},
            {"paymentMethods": [{"type": "ideal", "issuers": [{"id": "1121"}]}]},
        ]
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=next(bodies))

    client = AdyenClient(gateway_config, http_client=httpx.Client(transport=httpx.MockTransport(handler)))
    gateway = Gateway(gateway_config, client)

    assert gateway.get_available_payment_methods() == []
    assert "Invalid payment methods" in str(gateway.error)

    assert gateway.get_issuers() == []
    assert "Invalid issuers" in str(gateway.error)
