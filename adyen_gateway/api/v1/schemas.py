"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from adyen_gateway.domain.models import Address, Customer, PaymentLine


class PaymentCreateRequest(BaseModel):
    """Request body for POST /payments"""

    amount: Decimal = Field(..., gt=0, description="Total amount as a decimal, e.g. 10.00")
    currency: str = Field(..., min_length=3, max_length=3, description="ISO 4217 currency code")
    config_id: Optional[int] = Field(None, description="Gateway configuration, defaults to the configured one")
    method: Optional[str] = Field(None, description="Generic payment method, e.g. ideal or credit_card")
    issuer: Optional[str] = None
    description: Optional[str] = None
    return_url: Optional[str] = None
    mode: Optional[str] = Field(None, pattern="^(test|live)$")
    customer: Optional[Customer] = None
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    lines: Optional[List[PaymentLine]] = None


class PaymentStateResponse(BaseModel):
    """Payment as seen by the gateway"""

    payment_id: int
    status: str
    method: Optional[str] = None
    transaction_id: Optional[str] = None
    action_url: Optional[str] = None


class GatewayStepResponse(PaymentStateResponse):
    """Response for starting a payment or handling its return"""

    outcome: str
    error: Optional[str] = None


class PaymentMethodsResponse(BaseModel):
    payment_methods: List[str]
    error: Optional[str] = None


class IssuerGroup(BaseModel):
    options: Dict[str, str]


class IssuersResponse(BaseModel):
    issuers: List[IssuerGroup]
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    """Structured error of the payment submission endpoint"""

    code: str
    message: str
    data: Any = None
