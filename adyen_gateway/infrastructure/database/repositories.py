"""Data access layer for payments"""

from decimal import Decimal
from typing import Any, List, Optional

from pydantic import TypeAdapter
from sqlalchemy.orm import Session

from adyen_gateway.domain.models import Address, Customer, Money, Payment, PaymentLine
from adyen_gateway.infrastructure.database.models import PaymentRecord

_customer_adapter = TypeAdapter(Optional[Customer])
_address_adapter = TypeAdapter(Optional[Address])
_lines_adapter = TypeAdapter(Optional[List[PaymentLine]])


def _dump(adapter: TypeAdapter, value: Any) -> Any:
    return adapter.dump_python(value, mode="json")


class PaymentRepository:
    """Repository for payments"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(self, payment: Payment) -> Payment:
        """Persist a new payment and assign its id"""
        record = PaymentRecord()
        self._apply(record, payment)
        self.db.add(record)
        self.db.flush()  # Get ID without committing

        payment.id = record.id
        return payment

    def get_payment(self, payment_id: int) -> Payment | None:
        record = self.db.get(PaymentRecord, payment_id)

        if record is None:
            return None

        return self._to_domain(record)

    def save_payment(self, payment: Payment) -> None:
        """Write the gateway's changes back to the stored payment"""
        record = self.db.get(PaymentRecord, payment.id)

        if record is None:
            raise LookupError(f"Payment {payment.id} does not exist")

        self._apply(record, payment)
        self.db.flush()

    @staticmethod
    def _apply(record: PaymentRecord, payment: Payment) -> None:
        record.config_id = payment.config_id
        record.mode = payment.mode
        record.method = payment.method
        record.issuer = payment.issuer
        record.description = payment.description
        record.total_value = str(payment.total_amount.value)
        record.currency = payment.total_amount.currency
        record.return_url = payment.return_url
        record.customer = _dump(_customer_adapter, payment.customer)
        record.billing_address = _dump(_address_adapter, payment.billing_address)
        record.shipping_address = _dump(_address_adapter, payment.shipping_address)
        record.lines = _dump(_lines_adapter, payment.lines)
        record.status = payment.status
        record.transaction_id = payment.transaction_id
        record.action_url = payment.action_url
        record.meta = dict(payment.meta)

    @staticmethod
    def _to_domain(record: PaymentRecord) -> Payment:
        return Payment(
            id=record.id,
            config_id=record.config_id,
            mode=record.mode,
            method=record.method,
            issuer=record.issuer,
            description=record.description,
            total_amount=Money(value=Decimal(record.total_value), currency=record.currency),
            return_url=record.return_url,
            customer=_customer_adapter.validate_python(record.customer),
            billing_address=_address_adapter.validate_python(record.billing_address),
            shipping_address=_address_adapter.validate_python(record.shipping_address),
            lines=_lines_adapter.validate_python(record.lines),
            status=record.status,
            transaction_id=record.transaction_id,
            action_url=record.action_url,
            meta=dict(record.meta or {}),
        )
