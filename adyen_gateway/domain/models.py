"""Domain models - the provider-agnostic payment as seen by the host"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List

from adyen_gateway.domain.currencies import to_minor_units


class PaymentMethods:
    """Generic payment method identifiers"""

    APPLE_PAY = "apple_pay"
    BANCONTACT = "bancontact"
    CREDIT_CARD = "credit_card"
    DIRECT_DEBIT = "direct_debit"
    EPS = "eps"
    GIROPAY = "giropay"
    GOOGLE_PAY = "google_pay"
    IDEAL = "ideal"
    MAESTRO = "maestro"
    PAYPAL = "paypal"
    SOFORT = "sofort"


class PaymentStatus:
    """Generic payment statuses"""

    OPEN = "Open"
    SUCCESS = "Success"
    FAILURE = "Failure"
    CANCELLED = "Cancelled"


class Gender:
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Modes:
    TEST = "test"
    LIVE = "live"


@dataclass
class Money:
    """Decimal amount in a currency"""

    value: Decimal
    currency: str

    @property
    def minor_units(self) -> int:
        return to_minor_units(self.value, self.currency)


@dataclass
class TaxedMoney(Money):
    """Amount including tax, with optional tax breakdown"""

    tax_value: Decimal | None = None
    tax_percentage: Decimal | None = None

    @property
    def including_tax(self) -> Money:
        return Money(value=self.value, currency=self.currency)

    @property
    def excluding_tax(self) -> Money:
        tax = self.tax_value if self.tax_value is not None else Decimal(0)
        return Money(value=self.value - tax, currency=self.currency)

    @property
    def tax_amount(self) -> Money | None:
        if self.tax_value is None:
            return None
        return Money(value=self.tax_value, currency=self.currency)


@dataclass
class ContactName:
    first_name: str | None = None
    last_name: str | None = None


@dataclass
class Address:
    """Billing or shipping address"""

    street_name: str | None = None
    house_number: str | None = None
    postal_code: str | None = None
    city: str | None = None
    region: str | None = None
    country_code: str | None = None


@dataclass
class Customer:
    name: ContactName | None = None
    email: str | None = None
    phone: str | None = None
    ip_address: str | None = None
    locale: str | None = None
    user_id: str | None = None
    gender: str | None = None
    birth_date: date | None = None


@dataclass
class PaymentLine:
    """Single order line on a payment"""

    quantity: int
    total_amount: TaxedMoney
    unit_price: TaxedMoney
    id: str | None = None
    name: str | None = None
    description: str | None = None


@dataclass
class Payment:
    """
    Generic payment owned by the host.

    The gateway only reads from it and writes back the transaction id,
    action url, status and meta.
    """

    total_amount: Money
    id: int | None = None
    config_id: int | None = None
    mode: str = Modes.TEST
    method: str | None = None
    issuer: str | None = None
    description: str | None = None
    return_url: str | None = None
    customer: Customer | None = None
    billing_address: Address | None = None
    shipping_address: Address | None = None
    lines: List[PaymentLine] | None = None
    status: str = PaymentStatus.OPEN
    transaction_id: str | None = None
    action_url: str | None = None
    meta: Dict[str, str] = field(default_factory=dict)

    def get_meta(self, key: str) -> str | None:
        return self.meta.get(key)

    def set_meta(self, key: str, value: str | None) -> None:
        if value is None:
            self.meta.pop(key, None)
            return
        self.meta[key] = value
