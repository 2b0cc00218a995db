"""Payment start, hosted checkout page and return URL handling"""

import html
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from adyen_gateway.api.dependencies import get_gateway_registry, get_request_id
from adyen_gateway.api.v1.schemas import GatewayStepResponse, PaymentCreateRequest, PaymentStateResponse
from adyen_gateway.config import settings
from adyen_gateway.domain.models import Money, Payment
from adyen_gateway.gateway import CheckoutContext, Gateway, GatewayRegistry, Outcome
from adyen_gateway.infrastructure.database.repositories import PaymentRepository
from adyen_gateway.infrastructure.database.session import get_db

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}

CHECKOUT_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta name="robots" content="noindex,nofollow">
<title>Checkout</title>
<script src="{script_url}"></script>
</head>
<body>
<div class="adyen-checkout"></div>
<script>
var adyenCheckoutConfig = {config};
chckt.checkout(adyenCheckoutConfig.paymentSession, ".adyen-checkout", adyenCheckoutConfig.configObject);
</script>
</body>
</html>
"""


def render_checkout(context: CheckoutContext) -> str:
    """Checkout page mounting the Web SDK with the payment session"""
    config = json.dumps(
        {
            "paymentSession": context.payment_session,
            "configObject": {"context": context.environment},
        }
    )

    return CHECKOUT_TEMPLATE.format(
        script_url=html.escape(context.script_url, quote=True),
        # Keep the session from closing the script element
        config=config.replace("</", "<\\/"),
    )


def _get_payment(repository: PaymentRepository, payment_id: int) -> Payment:
    payment = repository.get_payment(payment_id)

    if payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")

    return payment


def _get_gateway(registry: GatewayRegistry, payment: Payment) -> Gateway:
    gateway = registry.get(payment.config_id)

    if gateway is None:
        raise HTTPException(status_code=404, detail="Gateway not found")

    return gateway


def _step_response(payment: Payment, outcome: Outcome, gateway: Gateway) -> GatewayStepResponse:
    return GatewayStepResponse(
        payment_id=payment.id,
        status=payment.status,
        method=payment.method,
        transaction_id=payment.transaction_id,
        action_url=payment.action_url,
        outcome=outcome.value,
        error=str(gateway.error) if outcome == Outcome.FAILURE and gateway.error else None,
    )


@router.post("/payments", response_model=GatewayStepResponse, status_code=201)
async def start_payment(
    request_body: PaymentCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    registry: GatewayRegistry = Depends(get_gateway_registry),
):
    """
    Create a payment and start it at Adyen.

    Flow:
    1. Persist the payment to obtain its id (used as Adyen reference)
    2. Start it through the /payments API or a Web SDK payment session
    3. Persist transaction id, action url, status and meta
    """
    config_id = request_body.config_id or settings.gateway_config_id

    gateway = registry.get(config_id)

    if gateway is None:
        raise HTTPException(status_code=404, detail="Gateway not found")

    payment = Payment(
        config_id=config_id,
        mode=request_body.mode or gateway.config.mode,
        total_amount=Money(value=request_body.amount, currency=request_body.currency.upper()),
        method=request_body.method,
        issuer=request_body.issuer,
        description=request_body.description,
        return_url=request_body.return_url,
        customer=request_body.customer,
        billing_address=request_body.billing_address,
        shipping_address=request_body.shipping_address,
        lines=request_body.lines,
    )

    repository = PaymentRepository(db)
    repository.create_payment(payment)

    outcome = await run_in_threadpool(gateway.start, payment)

    repository.save_payment(payment)
    db.commit()

    if outcome == Outcome.FAILURE:
        logging.error(
            f"Starting payment {payment.id} failed: {gateway.error}",
            extra={"request_id": get_request_id(request)},
        )

    return _step_response(payment, outcome, gateway)


@router.get("/payments/{payment_id}", response_model=PaymentStateResponse)
def get_payment(payment_id: int, db: Session = Depends(get_db)):
    payment = _get_payment(PaymentRepository(db), payment_id)

    return PaymentStateResponse(
        payment_id=payment.id,
        status=payment.status,
        method=payment.method,
        transaction_id=payment.transaction_id,
        action_url=payment.action_url,
    )


@router.get("/payments/{payment_id}/redirect", response_class=HTMLResponse)
def payment_redirect(
    payment_id: int,
    db: Session = Depends(get_db),
    registry: GatewayRegistry = Depends(get_gateway_registry),
):
    """Render the Web SDK checkout, or send the shopper on to the action URL"""
    payment = _get_payment(PaymentRepository(db), payment_id)
    gateway = _get_gateway(registry, payment)

    outcome, context = gateway.payment_redirect(payment)

    if outcome == Outcome.NOT_APPLICABLE or context is None:
        if payment.action_url and payment.action_url != gateway.pay_redirect_url(payment):
            return RedirectResponse(payment.action_url, status_code=303)

        raise HTTPException(status_code=404, detail="No checkout available for this payment")

    return HTMLResponse(render_checkout(context), headers=NO_CACHE_HEADERS)


@router.get("/payments/{payment_id}/return", response_model=GatewayStepResponse)
def payment_return(
    payment_id: int,
    request: Request,
    db: Session = Depends(get_db),
    registry: GatewayRegistry = Depends(get_gateway_registry),
):
    """Reconcile the payment status when Adyen sends the shopper back"""
    repository = PaymentRepository(db)
    payment = _get_payment(repository, payment_id)
    gateway = _get_gateway(registry, payment)

    outcome = gateway.update_status(payment, request.query_params)

    if outcome != Outcome.NOT_APPLICABLE:
        repository.save_payment(payment)
        db.commit()

    return _step_response(payment, outcome, gateway)
