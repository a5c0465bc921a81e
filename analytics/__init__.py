"""Analytics aggregation engine.

Turns raw per-day, per-platform, per-campaign counters into grouped time
series, summary KPIs, trend deltas and top-performer rankings, behind a
time-boxed result cache. The SQLAlchemy storage collaborator lives in
``analytics.storage`` and is imported separately so the computation here
has no database dependency.
"""

from .aggregator import aggregate_rows, sort_by_date
from .cache import CacheEntry, ResultCache, build_fingerprint
from .engine import AnalyticsEngine
from .errors import AnalyticsError, StorageError, ValidationError
from .formulas import AVG_ORDER_VALUE
from .summary import calculate_summary
from .top_performers import rank_top_performers
from .trends import calculate_trends
from .types import (
    GROUP_BY_MODES,
    METRIC_NAMES,
    PLATFORM_NAMES,
    AnalyticsQuery,
    GroupedRecord,
    RawMetricRow,
    SummaryStats,
    TopPerformers,
    TrendDeltas,
)
from .validation import validate_query

__all__ = [
    'AVG_ORDER_VALUE',
    'GROUP_BY_MODES',
    'METRIC_NAMES',
    'PLATFORM_NAMES',
    'AnalyticsEngine',
    'AnalyticsError',
    'AnalyticsQuery',
    'CacheEntry',
    'GroupedRecord',
    'RawMetricRow',
    'ResultCache',
    'StorageError',
    'SummaryStats',
    'TopPerformers',
    'TrendDeltas',
    'ValidationError',
    'aggregate_rows',
    'build_fingerprint',
    'calculate_summary',
    'calculate_trends',
    'rank_top_performers',
    'sort_by_date',
    'validate_query',
]
