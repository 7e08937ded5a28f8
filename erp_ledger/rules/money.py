"""
Decimal parsing and currency formatting.

Amounts travel through the API as decimal strings. Parsing is
strict: a value that is not a finite number raises ParseError
instead of silently becoming zero.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")


class ParseError(ValueError):
    """Raised when an amount cannot be read as a finite decimal."""


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str
    decimals: int
    rate_to_aed: Decimal


CURRENCIES: dict[str, Currency] = {
    c.code: c for c in (
        Currency("AED", "UAE Dirham", "د.إ", 2, Decimal("1.0")),
        Currency("USD", "US Dollar", "$", 2, Decimal("3.67")),
        Currency("EUR", "Euro", "€", 2, Decimal("4.01")),
        Currency("GBP", "British Pound", "£", 2, Decimal("4.65")),
        Currency("SAR", "Saudi Riyal", "ر.س", 2, Decimal("0.98")),
        Currency("KWD", "Kuwaiti Dinar", "د.ك", 3, Decimal("12.05")),
        Currency("QAR", "Qatari Riyal", "ر.ق", 2, Decimal("1.01")),
        Currency("BHD", "Bahraini Dinar", "د.ب", 3, Decimal("9.74")),
        Currency("OMR", "Omani Rial", "ر.ع.", 3, Decimal("9.54")),
        Currency("INR", "Indian Rupee", "₹", 2, Decimal("0.044")),
        Currency("PKR", "Pakistani Rupee", "₨", 2, Decimal("0.013")),
        Currency("BDT", "Bangladeshi Taka", "৳", 2, Decimal("0.031")),
        Currency("LKR", "Sri Lankan Rupee", "Rs", 2, Decimal("0.012")),
        Currency("PHP", "Philippine Peso", "₱", 2, Decimal("0.066")),
        Currency("JPY", "Japanese Yen", "¥", 0, Decimal("0.025")),
        Currency("CNY", "Chinese Yuan", "¥", 2, Decimal("0.51")),
    )
}

BASE_CURRENCY = "AED"


def parse_amount(value) -> Decimal:
    """
    Read an amount from user or API input.

    Accepts Decimal, int, float or a numeric string. Empty input,
    non-numeric text, NaN and infinity raise ParseError.
    """
    if isinstance(value, bool) or value is None:
        raise ParseError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ParseError("Amount is required")
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise ParseError(f"Invalid amount: {value!r}")
    else:
        raise ParseError(f"Invalid amount: {value!r}")

    if not result.is_finite():
        raise ParseError(f"Invalid amount: {value!r}")
    return result


def parse_optional_amount(value, default: str = "0") -> Decimal:
    """Like parse_amount, but a missing value means `default`."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal(default)
    return parse_amount(value)


def quantize(amount: Decimal, places: int = 2) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return amount.quantize(exponent, rounding=ROUND_HALF_UP)


def to_money_string(amount, places: int = 2) -> str:
    """Fixed-point string with `places` decimals, e.g. 105 -> '105.00'."""
    return f"{quantize(parse_amount(amount), places):f}"


def amount_string(amount) -> str:
    """
    Plain string form of an amount without forcing decimals.

    '200' stays '200' and '200.50' stays '200.50'; exponent
    notation is expanded.
    """
    value = parse_amount(amount)
    if value == 0:
        return "0"
    return f"{value:f}"


def format_currency(amount, currency: str = "USD") -> str:
    """
    Render an amount for display, e.g. '$1,234.50' or '-€10.00'.

    Unknown currency codes fall back to '<amount> <CODE>'.
    """
    value = parse_amount(amount)
    info = CURRENCIES.get(currency)
    if info is None:
        return f"{quantize(value):f} {currency}"

    rounded = quantize(value, info.decimals)
    digits = f"{abs(rounded):,.{info.decimals}f}"
    sign = "-" if rounded < 0 else ""
    return f"{sign}{info.symbol}{digits}"


def convert(amount, from_currency: str, to_currency: str) -> Decimal:
    """Convert between supported currencies through the AED base rate."""
    value = parse_amount(amount)
    if from_currency == to_currency:
        return value
    for code in (from_currency, to_currency):
        if code not in CURRENCIES:
            raise ValueError(f"Currency {code} not supported")
    in_base = value * CURRENCIES[from_currency].rate_to_aed
    return in_base / CURRENCIES[to_currency].rate_to_aed
