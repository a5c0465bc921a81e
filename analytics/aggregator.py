"""Folds raw metric rows into grouped records with derived metrics."""

from . import formulas
from .grouping import aggregation_key, bucket_date
from .types import GroupedRecord


def aggregate_rows(rows, group_by='day', avg_order_value=formulas.AVG_ORDER_VALUE):
    """
    Sum raw counters per (bucket date, platform, campaign) and derive metrics.

    Descriptive campaign fields come from the first row seen for a key.
    Counters are summed unrounded; cost and the derived metrics are rounded
    once, after every row has been folded.

    Args:
        rows (iterable of RawMetricRow): The filtered raw rows, in any order.
        group_by (str): 'day', 'week' or 'month'.
        avg_order_value (float): Revenue assumed per conversion for ROI.

    Returns:
        list of GroupedRecord: One record per distinct key, in first-seen order.
            An empty input yields an empty list.
    """
    totals = {}
    for row in rows:
        key = aggregation_key(row, group_by)
        entry = totals.get(key)
        if entry is None:
            entry = totals[key] = {
                'date': bucket_date(row.date, group_by),
                'platform': row.platform,
                'campaign_id': row.campaign_id,
                'campaign_name': row.campaign_name,
                'campaign_status': row.campaign_status,
                'campaign_budget': row.campaign_budget,
                'impressions': 0,
                'clicks': 0,
                'conversions': 0,
                'cost': 0.0,
                'records': 0,
            }
        entry['impressions'] += row.impressions
        entry['clicks'] += row.clicks
        entry['conversions'] += row.conversions
        entry['cost'] += row.cost
        entry['records'] += 1

    return [_finalize(entry, avg_order_value) for entry in totals.values()]


def _finalize(entry, avg_order_value):
    impressions, clicks = entry['impressions'], entry['clicks']
    conversions, cost = entry['conversions'], entry['cost']
    return GroupedRecord(
        ctr=formulas.ctr(impressions, clicks),
        conversion_rate=formulas.conversion_rate(clicks, conversions),
        cpc=formulas.cpc(clicks, cost),
        cpa=formulas.cpa(conversions, cost),
        roi=formulas.roi(cost, conversions, avg_order_value),
        **dict(entry, cost=formulas.round2(cost)),
    )


def sort_by_date(records):
    """Ascending by bucket date. Records sharing a date keep their relative order."""
    return sorted(records, key=lambda record: record.date)
