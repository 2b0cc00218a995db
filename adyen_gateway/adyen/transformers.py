"""Transform generic domain values to Adyen values"""

from adyen_gateway.adyen.models import AdyenGender, Address, Amount
from adyen_gateway.domain import models


def transform_amount(money: models.Money) -> Amount:
    """Money in a currency → Adyen amount in minor units"""
    return Amount(currency=money.currency, value=money.minor_units)


def transform_gender(gender: str | None) -> AdyenGender:
    """Unknown or missing gender maps to UNKNOWN, never None"""
    if gender == models.Gender.MALE:
        return AdyenGender.MALE

    if gender == models.Gender.FEMALE:
        return AdyenGender.FEMALE

    return AdyenGender.UNKNOWN


def transform_address(address: models.Address) -> Address:
    return Address(
        street=address.street_name,
        house_number_or_name=address.house_number,
        postal_code=address.postal_code,
        city=address.city,
        state_or_province=address.region,
        country=address.country_code,
    )
