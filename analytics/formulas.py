"""Derived advertising metrics computed from raw counters.

Every function is pure. Each returns 0 when its denominator is not positive
and rounds its result to two decimals, half-up, once at the end.
"""

from decimal import Decimal, ROUND_HALF_UP

# Assumed revenue per conversion used for ROI estimation. Not real order data.
AVG_ORDER_VALUE = 100

_CENTS = Decimal('0.01')


def round2(value):
    """Round half-up to two decimals. ``Decimal(str(x))`` avoids binary float artefacts."""
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def ctr(impressions, clicks):
    if impressions <= 0:
        return 0
    return round2(clicks / impressions * 100)


def conversion_rate(clicks, conversions):
    if clicks <= 0:
        return 0
    return round2(conversions / clicks * 100)


def cpc(clicks, cost):
    if clicks <= 0:
        return 0
    return round2(cost / clicks)


def cpa(conversions, cost):
    if conversions <= 0:
        return 0
    return round2(cost / conversions)


def roi(cost, conversions, avg_order_value=AVG_ORDER_VALUE):
    """Percent return assuming each conversion is worth ``avg_order_value``."""
    if cost <= 0:
        return 0
    revenue = conversions * avg_order_value
    return round2((revenue - cost) / cost * 100)


def percent_change(first, second):
    """Relative change from ``first`` to ``second`` in percent.

    A zero baseline reports 100 when anything positive follows, else 0.
    """
    if first == 0:
        return 100 if second > 0 else 0
    return round2((second - first) / first * 100)
