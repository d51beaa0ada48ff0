from decimal import Decimal

import pytest

from order.pricing import compute_totals, to_minor_units


@pytest.mark.parametrize(
    "subtotal, tax, shipping, total",
    [
        ("50.00", "4.00", "10.00", "64.00"),
        ("150.00", "12.00", "0.00", "162.00"),
        # free shipping starts strictly above 100
        ("100.00", "8.00", "10.00", "118.00"),
        ("100.01", "8.00", "0.00", "108.01"),
    ],
)
def test_compute_totals(subtotal, tax, shipping, total):
    totals = compute_totals(Decimal(subtotal))

    assert totals.subtotal == Decimal(subtotal)
    assert totals.tax == Decimal(tax)
    assert totals.shipping == Decimal(shipping)
    assert totals.total == Decimal(total)


def test_tax_rounds_half_up_to_cents():
    # 19.99 * 0.08 = 1.5992
    assert compute_totals(Decimal("19.99")).tax == Decimal("1.60")


def test_to_minor_units():
    assert to_minor_units(Decimal("64.00")) == 6400
    assert to_minor_units(Decimal("108.01")) == 10801
    assert to_minor_units(Decimal("0.005")) == 1
