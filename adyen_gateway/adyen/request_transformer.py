"""Populate an Adyen request from a generic payment"""

from typing import Any, Dict, List

from adyen_gateway.adyen.models import Channel, LineItem, Name
from adyen_gateway.adyen.requests import RequestT
from adyen_gateway.adyen.transformers import transform_address, transform_gender
from adyen_gateway.domain.models import Payment, PaymentLine


def transform_payment_request(payment: Payment, request: RequestT) -> RequestT:
    """
    Return a copy of the request enriched with the payment's shopper data,
    addresses and lines.

    Works for both the direct API request and the payment session request.
    The payment is only read.
    """
    fields: Dict[str, Any] = {
        "channel": Channel.WEB,
        "shopper_statement": payment.description,
    }

    customer = payment.customer

    if customer is not None:
        fields["shopper_ip"] = customer.ip_address
        fields["shopper_locale"] = customer.locale
        fields["shopper_reference"] = customer.user_id
        fields["telephone_number"] = customer.phone

        if customer.name is not None:
            fields["shopper_name"] = Name(
                first_name=customer.name.first_name,
                last_name=customer.name.last_name,
                gender=transform_gender(customer.gender),
            )

        if customer.birth_date is not None:
            fields["date_of_birth"] = customer.birth_date.strftime("%Y-%m-%d")

    if payment.billing_address is not None:
        fields["billing_address"] = transform_address(payment.billing_address)

    if payment.shipping_address is not None:
        fields["delivery_address"] = transform_address(payment.shipping_address)

    if payment.lines is not None:
        fields["line_items"] = transform_lines(payment.lines)

    return request.with_fields(**fields)


def transform_lines(lines: List[PaymentLine]) -> List[LineItem]:
    items = []

    for position, line in enumerate(lines, start=1):
        # Fall back to the line name, then to the position
        description = line.description

        if not description:
            description = line.name if line.name else f"Item {position}"

        item: Dict[str, Any] = {
            "description": description,
            "quantity": line.quantity,
            "amount_including_tax": line.total_amount.including_tax.minor_units,
            "amount_excluding_tax": line.total_amount.excluding_tax.minor_units,
            "id": line.id,
        }

        if line.unit_price.tax_amount is not None:
            tax_amount = line.total_amount.tax_amount
            tax_percentage = line.total_amount.tax_percentage

            item["tax_amount"] = tax_amount.minor_units if tax_amount is not None else None
            item["tax_percentage"] = int(round(tax_percentage * 100)) if tax_percentage is not None else None

        items.append(LineItem(**item))

    return items
