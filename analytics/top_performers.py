"""Rankings of campaigns and platforms re-aggregated from raw rows."""

from operator import attrgetter

from . import formulas
from .types import PerformerEntry, TopPerformers

TOP_CAMPAIGNS_LIMIT = 5
TOP_PLATFORMS_LIMIT = 3


def _aggregate_by(rows, key_of, name_of, with_id, avg_order_value):
    totals = {}
    for row in rows:
        key = key_of(row)
        entry = totals.setdefault(key, {
            'id': key if with_id else None,
            'name': name_of(row),
            'impressions': 0,
            'clicks': 0,
            'conversions': 0,
            'cost': 0.0,
        })
        entry['impressions'] += row.impressions
        entry['clicks'] += row.clicks
        entry['conversions'] += row.conversions
        entry['cost'] += row.cost

    return [
        PerformerEntry(
            roi=formulas.roi(entry['cost'], entry['conversions'], avg_order_value),
            **dict(entry, cost=formulas.round2(entry['cost'])),
        )
        for entry in totals.values()
    ]


def _top(entries, metric, limit):
    # sorted() is stable, so ties keep first-seen order.
    return tuple(sorted(entries, key=attrgetter(metric), reverse=True)[:limit])


def rank_top_performers(rows, avg_order_value=formulas.AVG_ORDER_VALUE):
    """Top campaigns by impressions, ROI and conversions, and top platforms by clicks."""
    rows = list(rows)
    if not rows:
        return TopPerformers()

    campaigns = _aggregate_by(
        rows, attrgetter('campaign_id'), attrgetter('campaign_name'), True, avg_order_value,
    )
    platforms = _aggregate_by(
        rows, attrgetter('platform'), attrgetter('platform'), False, avg_order_value,
    )

    return TopPerformers(
        top_campaigns=_top(campaigns, 'impressions', TOP_CAMPAIGNS_LIMIT),
        top_platforms=_top(platforms, 'clicks', TOP_PLATFORMS_LIMIT),
        best_roi=_top(campaigns, 'roi', TOP_CAMPAIGNS_LIMIT),
        highest_conversions=_top(campaigns, 'conversions', TOP_CAMPAIGNS_LIMIT),
    )
