from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP

TAX_RATE = Decimal("0.08")
FREE_SHIPPING_THRESHOLD = Decimal("100.00")
FLAT_SHIPPING = Decimal("10.00")

CENT = Decimal("0.01")

OrderTotals = namedtuple("OrderTotals", ["subtotal", "tax", "shipping", "total"])


def _cents(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(subtotal):
    """
    >>> compute_totals(Decimal("50.00")).total
    Decimal('64.00')
    >>> compute_totals(Decimal("150.00")).total
    Decimal('162.00')
    """
    subtotal = _cents(subtotal)
    tax = _cents(subtotal * TAX_RATE)
    # free shipping only strictly above the threshold
    shipping = Decimal("0.00") if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
    return OrderTotals(subtotal, tax, shipping, subtotal + tax + shipping)


def to_minor_units(amount):
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
