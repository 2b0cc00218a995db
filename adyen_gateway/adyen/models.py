"""Adyen Checkout API value objects"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from adyen_gateway.domain.currencies import from_minor_units


class AdyenModel(BaseModel):
    """Immutable Adyen object serialized with camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def get_json(self) -> Dict[str, Any]:
        """JSON-ready dict as sent to Adyen, without unset fields"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Channel(str, Enum):
    WEB = "Web"
    IOS = "iOS"
    ANDROID = "Android"


class AdyenGender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    UNKNOWN = "UNKNOWN"


class Amount(AdyenModel):
    """Adyen amount object."""

    currency: str = Field(..., min_length=3, max_length=3, description="ISO 4217 currency code")
    value: int = Field(..., description="Amount in minor units")

    @field_validator("currency")
    @classmethod
    def uppercase_currency(cls, v: str) -> str:
        return v.upper()

    def to_decimal(self) -> Decimal:
        return from_minor_units(self.value, self.currency)


class Name(AdyenModel):
    first_name: str | None = None
    last_name: str | None = None
    gender: AdyenGender = AdyenGender.UNKNOWN


class Address(AdyenModel):
    street: str | None = None
    house_number_or_name: str | None = None
    postal_code: str | None = None
    city: str | None = None
    state_or_province: str | None = None
    country: str | None = None


class LineItem(AdyenModel):
    """Single line item; amounts in minor units, tax percentage in hundredths"""

    description: str = Field(..., min_length=1)
    quantity: int
    amount_including_tax: int
    amount_excluding_tax: int | None = None
    tax_amount: int | None = None
    tax_percentage: int | None = None
    id: str | None = None
