"""POST /payments/{payment_id} - payment method submitted by the Web SDK"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from adyen_gateway.adyen.payment_methods import payment_method_from_dict
from adyen_gateway.adyen.result_codes import ResultCode
from adyen_gateway.api.dependencies import get_gateway_registry, get_request_id
from adyen_gateway.api.v1.schemas import ErrorResponse
from adyen_gateway.domain.exceptions import PaymentsControllerError
from adyen_gateway.gateway import GatewayRegistry
from adyen_gateway.infrastructure.database.repositories import PaymentRepository
from adyen_gateway.infrastructure.database.session import get_db

router = APIRouter()


class PaymentsController:
    """
    Creates a payment for the payment method state data the Web SDK posts
    before completing.

    https://docs.adyen.com/developers/checkout/web-sdk/customization/logic#beforecomplete
    """

    def __init__(self, repository: PaymentRepository, registry: GatewayRegistry):
        self.repository = repository
        self.registry = registry

    def handle(self, payment_id: int | None, body: bytes | str | None) -> Dict[str, Any]:
        """
        Validate the submission and create the payment at Adyen.

        Returns {"action": ...} when the shopper has a follow-up step,
        otherwise {"resultCode": ...}.

        Raises:
            PaymentsControllerError: First failed validation, in order
        """
        if payment_id is None:
            raise PaymentsControllerError(
                "adyen-no-payment-id",
                "No payment ID given in `payment_id` parameter.",
            )

        payment = self.repository.get_payment(payment_id)

        if payment is None:
            raise PaymentsControllerError(
                "adyen-payment-not-found",
                f"Could not find payment with ID `{payment_id}`.",
                status_code=404,
                data=payment_id,
            )

        # State data
        try:
            data = json.loads(body) if body else None
        except ValueError:
            data = None

        if not isinstance(data, dict):
            raise PaymentsControllerError("adyen-no-data", "No state data given in request body.")

        # Gateway
        config_id = payment.config_id
        gateway = self.registry.get(config_id)

        if gateway is None:
            raise PaymentsControllerError(
                "adyen-gateway-not-found",
                f"Could not find gateway with ID `{config_id}`.",
                status_code=404,
                data=config_id,
            )

        if gateway.client is None:
            raise PaymentsControllerError(
                "adyen-client-not-found",
                f"Could not find client in gateway with ID `{config_id}`.",
                status_code=500,
                data=config_id,
            )

        method_data = data.get("paymentMethod")

        if not isinstance(method_data, dict) or not method_data.get("type"):
            raise PaymentsControllerError("adyen-no-payment-method", "No payment method given.")

        try:
            payment_method = payment_method_from_dict(method_data)
        except ValidationError as e:
            raise PaymentsControllerError(
                "adyen-invalid-payment-method",
                f"Invalid `{method_data['type']}` payment method: {e.error_count()} field(s) missing or invalid.",
                data=method_data["type"],
            ) from e

        response = gateway.create_payment(payment, payment_method)

        self.repository.save_payment(payment)

        if response is None:
            return {"resultCode": ResultCode.ERROR.value}

        # Return action if available
        if response.action is not None:
            return {"action": response.action}

        return {"resultCode": response.result_code}


@router.post(
    "/payments/{payment_id}",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def submit_payment_method(
    request: Request,
    payment_id: int = Path(..., gt=0, description="Payment ID"),
    db: Session = Depends(get_db),
    registry: GatewayRegistry = Depends(get_gateway_registry),
):
    """Create an Adyen payment for the payment method chosen in the Web SDK."""
    body = await request.body()

    controller = PaymentsController(PaymentRepository(db), registry)

    try:
        result = await run_in_threadpool(controller.handle, payment_id, body)
    except PaymentsControllerError as e:
        db.rollback()
        logging.warning(f"Payment submission rejected: {e.code}", extra={"request_id": get_request_id(request)})
        raise

    db.commit()

    return result
