"""First-half versus second-half comparison of a grouped time series."""

from .formulas import percent_change
from .types import TrendDeltas

_SUMMED = ('impressions', 'clicks', 'conversions', 'cost', 'roi')


def _half_totals(records):
    return {name: sum(getattr(record, name) for record in records) for name in _SUMMED}


def calculate_trends(records):
    """
    Percent change of each metric between the two halves of ``records``.

    ``records`` must already be sorted ascending by date. The split is at
    ``len(records) // 2``, so an odd-length series puts the extra record in
    the second half. Fewer than two records gives all-zero deltas.

    Impressions, clicks, conversions and cost compare half totals. ROI
    compares the mean of the per-record (already rounded) ROI values of each
    half instead, which is not the same as the aggregate ROI of the half.
    """
    if len(records) < 2:
        return TrendDeltas()

    midpoint = len(records) // 2
    first_half, second_half = records[:midpoint], records[midpoint:]
    first, second = _half_totals(first_half), _half_totals(second_half)

    return TrendDeltas(
        impressions_trend=percent_change(first['impressions'], second['impressions']),
        clicks_trend=percent_change(first['clicks'], second['clicks']),
        conversions_trend=percent_change(first['conversions'], second['conversions']),
        cost_trend=percent_change(first['cost'], second['cost']),
        roi_trend=percent_change(
            first['roi'] / len(first_half),
            second['roi'] / len(second_half),
        ),
    )
