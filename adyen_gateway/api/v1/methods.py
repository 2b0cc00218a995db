"""GET /payment-methods and /issuers - what the merchant account offers"""

from fastapi import APIRouter, Depends, HTTPException, Query

from adyen_gateway.api.dependencies import get_gateway_registry
from adyen_gateway.api.v1.schemas import IssuerGroup, IssuersResponse, PaymentMethodsResponse
from adyen_gateway.config import settings
from adyen_gateway.gateway import Gateway, GatewayRegistry

router = APIRouter()


def _resolve_gateway(registry: GatewayRegistry, config_id: int | None) -> Gateway:
    gateway = registry.get(config_id or settings.gateway_config_id)

    if gateway is None:
        raise HTTPException(status_code=404, detail="Gateway not found")

    return gateway


@router.get("/payment-methods", response_model=PaymentMethodsResponse)
def get_payment_methods(
    config_id: int | None = Query(None, description="Gateway configuration ID"),
    registry: GatewayRegistry = Depends(get_gateway_registry),
):
    """Generic payment methods active for the Adyen merchant account"""
    gateway = _resolve_gateway(registry, config_id)

    payment_methods = gateway.get_available_payment_methods()

    return PaymentMethodsResponse(
        payment_methods=payment_methods,
        error=str(gateway.error) if gateway.error else None,
    )


@router.get("/issuers", response_model=IssuersResponse)
def get_issuers(
    config_id: int | None = Query(None, description="Gateway configuration ID"),
    registry: GatewayRegistry = Depends(get_gateway_registry),
):
    """iDEAL issuers grouped as select options"""
    gateway = _resolve_gateway(registry, config_id)

    groups = gateway.get_issuers()

    return IssuersResponse(
        issuers=[IssuerGroup(**group) for group in groups],
        error=str(gateway.error) if gateway.error else None,
    )
