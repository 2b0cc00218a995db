"""Dependency injection for FastAPI endpoints"""

from typing import Iterator

from fastapi import Request
from adyen_gateway.adyen.config import GatewayConfig
from adyen_gateway.config import settings
from adyen_gateway.gateway import Gateway, GatewayRegistry
from adyen_gateway.infrastructure.clients.adyen import AdyenClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_gateway_registry() -> Iterator[GatewayRegistry]:
    """Provide request-scoped gateways for the configured Adyen account"""
    config = GatewayConfig.from_settings(settings)

    # Without an API key the gateway exists but cannot reach Adyen
    client = AdyenClient(config) if config.api_key else None

    registry = GatewayRegistry({config.config_id: Gateway(config, client)})
    try:
        yield registry
    finally:
        registry.close()
