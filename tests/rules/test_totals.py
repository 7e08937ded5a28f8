"""
Tests for line-item totals.
"""

from decimal import Decimal

import pytest

from erp_ledger.rules.money import ParseError
from erp_ledger.rules.totals import (
    LineItem,
    compute_totals,
    line_totals,
    money_strings,
)


def item(quantity, unit_price, tax_rate="0", description="Item"):
    return LineItem(
        description=description,
        quantity=Decimal(str(quantity)),
        unit_price=Decimal(str(unit_price)),
        tax_rate=Decimal(str(tax_rate)),
    )


class TestLineTotals:

    def test_line_total_includes_tax(self):
        line = line_totals(item(3, "19.99", 5))
        assert line.subtotal == Decimal("59.97")
        assert line.total == line.subtotal * Decimal("1.05")

    def test_zero_tax(self):
        line = line_totals(item(4, 25))
        assert line.tax_amount == 0
        assert line.total == Decimal("100")


class TestComputeTotals:

    def test_widget_with_discount(self):
        totals = compute_totals([item(2, 50, 10, "Widget")], discount="5")
        assert totals.subtotal == Decimal("100")
        assert totals.tax_amount == Decimal("10")
        assert totals.total_amount == Decimal("105")

    def test_money_strings(self):
        totals = compute_totals([item(2, 50, 10, "Widget")], discount="5")
        assert money_strings(totals) == {
            "subtotal": "100.00",
            "tax_amount": "10.00",
            "discount": "5.00",
            "total_amount": "105.00",
        }

    def test_totals_add_across_items(self):
        items = [item(1, 100, 5), item(2, "12.50", 0), item("0.5", 40, 20)]
        totals = compute_totals(items)
        lines = [line_totals(i) for i in items]
        assert totals.subtotal == sum(l.subtotal for l in lines)
        assert totals.tax_amount == sum(l.tax_amount for l in lines)
        assert totals.total_amount == totals.subtotal + totals.tax_amount

    def test_discount_larger_than_total_goes_negative(self):
        totals = compute_totals([item(1, 10)], discount="25")
        assert totals.total_amount == Decimal("-15")

    def test_missing_discount_means_zero(self):
        totals = compute_totals([item(1, 10)], discount=None)
        assert totals.discount == 0

    def test_empty_items(self):
        totals = compute_totals([])
        assert totals.total_amount == 0

    def test_from_dict_reads_api_payload(self):
        line_item = LineItem.from_dict({
            "description": "Widget",
            "quantity": "2",
            "unit_price": 50,
        })
        assert line_item.tax_rate == 0
        assert line_totals(line_item).total == Decimal("100")

    def test_from_dict_rejects_bad_quantity(self):
        with pytest.raises(ParseError):
            LineItem.from_dict({"description": "x", "quantity": "two", "unit_price": 1})
