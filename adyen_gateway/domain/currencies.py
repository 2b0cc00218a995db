"""ISO 4217 minor unit exponents"""

from decimal import Decimal

DEFAULT_EXPONENT = 2

# Currencies whose minor unit differs from the default of 2 decimals
CURRENCY_EXPONENTS = {
    "BHD": 3,
    "BIF": 0,
    "CLP": 0,
    "DJF": 0,
    "GNF": 0,
    "IQD": 3,
    "ISK": 0,
    "JOD": 3,
    "JPY": 0,
    "KMF": 0,
    "KRW": 0,
    "KWD": 3,
    "LYD": 3,
    "OMR": 3,
    "PYG": 0,
    "RWF": 0,
    "TND": 3,
    "UGX": 0,
    "VND": 0,
    "VUV": 0,
    "XAF": 0,
    "XOF": 0,
    "XPF": 0,
}


def get_exponent(currency: str) -> int:
    return CURRENCY_EXPONENTS.get(currency.upper(), DEFAULT_EXPONENT)


def to_minor_units(value: Decimal, currency: str) -> int:
    """Convert a decimal amount to an integer in the smallest currency unit"""
    return int((Decimal(value) * (10 ** get_exponent(currency))).to_integral_value())


def from_minor_units(value: int, currency: str) -> Decimal:
    """Convert minor units back to a decimal amount"""
    exponent = get_exponent(currency)
    return Decimal(value).scaleb(-exponent)
