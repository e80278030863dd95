"""Tests for line item recomputation and document totals."""

from decimal import Decimal

import pytest

from pharmabill.domain.services.line_items import (
    STORE_PLACES,
    LineItem,
    LineItemAggregator,
    compute_totals,
)


class TestLineItem:
    def test_discounted_intra_state_line(self):
        line = LineItem(quantity=2, price="50", discount="10", gst_rate="12").recompute(False)
        assert line.taxable_value == Decimal("90")
        assert line.cgst == Decimal("5.4")
        assert line.sgst == Decimal("5.4")
        assert line.igst == Decimal("0")
        assert line.total == Decimal("100.8")

    def test_defaults_to_one_unit(self):
        line = LineItem()
        assert line.quantity == Decimal("1")
        assert line.price == Decimal("0")

    def test_bad_input_becomes_zero(self):
        line = LineItem(quantity="two", price="x", discount=None).recompute(True)
        assert line.quantity == Decimal("0")
        assert line.total == Decimal("0")

    def test_full_discount(self):
        line = LineItem(quantity=3, price=40, discount=100, gst_rate=18).recompute(True)
        assert line.taxable_value == Decimal("0")
        assert line.igst == Decimal("0")


class TestLineItemAggregator:
    def test_two_line_invoice_totals(self):
        agg = LineItemAggregator(is_inter_state=False)
        agg.add_line(quantity=2, price=50, discount=10, gst_rate=12)
        agg.add_line(quantity=1, price=100, discount=0, gst_rate=18)

        totals = agg.compute_totals()
        assert totals.subtotal == Decimal("200")
        assert totals.total_discount == Decimal("10")
        assert totals.total_taxable_value == Decimal("190")
        assert totals.total_cgst == Decimal("14.4")
        assert totals.total_sgst == Decimal("14.4")
        assert totals.total_igst == Decimal("0")
        assert totals.grand_total == Decimal("218.8")

    def test_pharmacy_counter_invoice(self):
        agg = LineItemAggregator(is_inter_state=False)
        strip = agg.add_line(quantity=2, price=100, discount=10, gst_rate=12)
        syrup = agg.add_line(quantity=1, price=500, gst_rate=5)

        assert strip.taxable_value == Decimal("180")
        assert strip.cgst == strip.sgst == Decimal("10.8")
        assert strip.total == Decimal("201.6")
        assert syrup.taxable_value == Decimal("500")
        assert syrup.cgst == syrup.sgst == Decimal("12.5")
        assert syrup.total == Decimal("525")

        totals = agg.compute_totals()
        assert totals.total_taxable_value == Decimal("680")
        assert totals.total_cgst == totals.total_sgst == Decimal("23.3")
        assert totals.grand_total == Decimal("726.6")

    def test_lines_rounded_to_stored_scale(self):
        agg = LineItemAggregator(is_inter_state=False)
        agg.add_line(quantity=1, price="10.01", gst_rate=5)
        agg.add_line(quantity=1, price="10.01", gst_rate=5)

        for line in agg:
            assert line.cgst == line.sgst == Decimal("0.2503")
            for value in (line.taxable_value, line.cgst, line.sgst, line.igst, line.total):
                assert value == value.quantize(STORE_PLACES)

        totals = agg.compute_totals()
        assert totals.total_cgst == Decimal("0.5006")
        assert totals.total_cgst == sum((l.cgst for l in agg), Decimal("0"))
        assert totals.grand_total == sum((l.total for l in agg), Decimal("0"))
        assert totals.subtotal - totals.total_discount == totals.total_taxable_value

    def test_empty_document_totals_are_zero(self):
        totals = LineItemAggregator().compute_totals()
        assert totals.grand_total == Decimal("0")
        assert totals.subtotal == Decimal("0")

    def test_totals_equal_sum_of_lines(self):
        agg = LineItemAggregator(is_inter_state=True)
        agg.add_line(quantity="1.5", price="33.33", discount="2.5", gst_rate="5")
        agg.add_line(quantity=7, price="9.99", gst_rate="12")
        totals = agg.compute_totals()
        assert totals.grand_total == sum((l.total for l in agg), Decimal("0"))
        assert totals.total_igst == sum((l.igst for l in agg), Decimal("0"))

    def test_update_recomputes_line(self):
        agg = LineItemAggregator()
        agg.add_line(quantity=1, price=100, gst_rate=18)
        line = agg.update_line(0, quantity=3)
        assert line.taxable_value == Decimal("300")
        assert line.total == Decimal("354")

    def test_update_rejects_unknown_field(self):
        agg = LineItemAggregator()
        agg.add_line()
        with pytest.raises(AttributeError):
            agg.update_line(0, total=5)

    def test_apply_product_uses_selling_price(self, paracetamol):
        agg = LineItemAggregator()
        agg.add_line()
        line = agg.apply_product(0, paracetamol)
        assert line.product_name == "Paracetamol 500mg"
        assert line.hsn_code == "3004"
        assert line.price == Decimal("50")
        assert line.gst_rate == Decimal("12")
        assert line.quantity == Decimal("1")

    def test_apply_product_uses_purchase_price_for_purchases(self, paracetamol):
        agg = LineItemAggregator(use_purchase_price=True)
        agg.add_line()
        assert agg.apply_product(0, paracetamol).price == Decimal("30")

    def test_switching_jurisdiction_moves_tax(self):
        agg = LineItemAggregator(is_inter_state=False)
        agg.add_line(quantity=1, price=1000, gst_rate=18)
        agg.set_jurisdiction(True)
        line = agg.lines[0]
        assert line.igst == Decimal("180")
        assert line.cgst == line.sgst == Decimal("0")

    def test_remove_line(self):
        agg = LineItemAggregator()
        agg.add_line(price=10)
        agg.add_line(price=20)
        agg.remove_line(0)
        assert len(agg) == 1
        assert agg.compute_totals().subtotal == Decimal("20")

    def test_compute_totals_helper(self):
        lines = [LineItem(price=10).recompute(False), LineItem(price=5).recompute(False)]
        assert compute_totals(lines).grand_total == Decimal("15")
