"""Dataset-wide KPIs over the raw filtered row set."""

from . import formulas
from .types import SummaryStats


def calculate_summary(rows, avg_order_value=formulas.AVG_ORDER_VALUE):
    """
    Totals of the raw counters plus rate metrics computed from those totals.

    The averages are ratios of totals rather than means of per-row ratios, so
    low-volume rows do not skew them. An empty row set gives an all-zero summary.
    """
    rows = list(rows)
    if not rows:
        return SummaryStats()

    impressions = sum(row.impressions for row in rows)
    clicks = sum(row.clicks for row in rows)
    conversions = sum(row.conversions for row in rows)
    cost = sum(row.cost for row in rows)

    return SummaryStats(
        total_impressions=impressions,
        total_clicks=clicks,
        total_conversions=conversions,
        total_cost=formulas.round2(cost),
        avg_ctr=formulas.ctr(impressions, clicks),
        avg_conversion_rate=formulas.conversion_rate(clicks, conversions),
        avg_cpc=formulas.cpc(clicks, cost),
        avg_cpa=formulas.cpa(conversions, cost),
        avg_roi=formulas.roi(cost, conversions, avg_order_value),
        total_campaigns=len({row.campaign_id for row in rows}),
        total_platforms=len({row.platform for row in rows}),
        date_range=len({row.date for row in rows}),
    )
