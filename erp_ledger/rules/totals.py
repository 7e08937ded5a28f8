"""
Line-item totals for credit notes and proforma invoices.

    line subtotal = quantity * unit price
    line tax      = line subtotal * tax rate / 100
    total         = subtotal - discount + tax

The discount is not clamped: a discount larger than subtotal plus
tax produces a negative total.
"""

from dataclasses import dataclass
from decimal import Decimal

from erp_ledger.rules.money import (
    parse_amount,
    parse_optional_amount,
    to_money_string,
)

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class LineItem:
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = Decimal("0")

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Build from an API payload or a stored JSON item."""
        return cls(
            description=data.get("description", ""),
            quantity=parse_amount(data.get("quantity", 0)),
            unit_price=parse_amount(data.get("unit_price", 0)),
            tax_rate=parse_optional_amount(data.get("tax_rate")),
        )


@dataclass(frozen=True)
class LineTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    tax_amount: Decimal
    discount: Decimal
    total_amount: Decimal


def line_totals(item: LineItem) -> LineTotals:
    subtotal = item.quantity * item.unit_price
    tax = subtotal * (item.tax_rate or Decimal("0")) / HUNDRED
    return LineTotals(subtotal=subtotal, tax_amount=tax, total=subtotal + tax)


def compute_totals(items: list[LineItem], discount="0") -> DocumentTotals:
    """Aggregate line totals and apply the header discount."""
    discount_value = parse_optional_amount(discount)
    subtotal = Decimal("0")
    tax_amount = Decimal("0")
    for item in items:
        line = line_totals(item)
        subtotal += line.subtotal
        tax_amount += line.tax_amount

    return DocumentTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount=discount_value,
        total_amount=subtotal - discount_value + tax_amount,
    )


def money_strings(totals: DocumentTotals) -> dict[str, str]:
    """The header amounts as 2-decimal strings, ready for submission."""
    return {
        "subtotal": to_money_string(totals.subtotal),
        "tax_amount": to_money_string(totals.tax_amount),
        "discount": to_money_string(totals.discount),
        "total_amount": to_money_string(totals.total_amount),
    }
