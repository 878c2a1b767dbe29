"""
Money helpers for provider calls.

Providers take integer amounts in the currency's minor unit (paise for INR);
the database keeps Decimals. Always quantize before converting.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import Union

CURRENCY_EXPONENT = {
    "INR": 2,
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "AED": 2,
    "SGD": 2,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "BHD": 3,
}

Amount = Union[Decimal, str, int, float]


def currency_exponent(currency: str) -> int:
    """Decimal places of a currency; unknown codes default to 2."""
    return CURRENCY_EXPONENT.get(currency.upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    return Decimal(10) ** -currency_exponent(currency)


def quantize(currency: str, amount: Amount) -> Decimal:
    """
    Round to the currency's precision with banker's rounding.

    >>> quantize("INR", "10.125")
    Decimal('10.12')
    """
    if isinstance(amount, float):
        amount = str(amount)
    return Decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_EVEN)


def to_minor(currency: str, amount: Amount) -> int:
    """
    >>> to_minor("INR", "249.50")
    24950
    >>> to_minor("JPY", "1234.56")
    1235
    """
    quantized = quantize(currency, amount)
    return int((quantized * (10 ** currency_exponent(currency))).to_integral_value())


def from_minor(currency: str, minor: int) -> Decimal:
    """
    >>> from_minor("INR", 24950)
    Decimal('249.50')
    """
    exponent = currency_exponent(currency)
    return quantize(currency, Decimal(minor) / (10 ** exponent))
