"""Query pipeline: cache lookup, raw-row fetch, aggregation and response assembly."""

import logging

from . import formulas
from .aggregator import aggregate_rows, sort_by_date
from .cache import ResultCache, build_fingerprint
from .summary import calculate_summary
from .top_performers import rank_top_performers
from .trends import calculate_trends
from .types import AnalyticsResponse
from .validation import validate_query

logger = logging.getLogger(__name__)


class AnalyticsEngine:
    """
    Turns an AnalyticsQuery into the dashboard response.

    The engine owns no connections. ``store`` is the storage collaborator
    (raw-row fetch, campaign/platform listings, cache table) and is built and
    closed by the host application. Computation is synchronous and keeps no
    state between calls, so one engine may serve concurrent requests as long
    as each has its own store session.
    """

    def __init__(self, store, cache=None, avg_order_value=formulas.AVG_ORDER_VALUE):
        self.store = store
        self.cache = cache if cache is not None else ResultCache(store)
        self.avg_order_value = avg_order_value

    def build_report(self, rows, group_by='day'):
        """Pure part of the pipeline: grouped series, summary, trends and rankings."""
        rows = list(rows)
        grouped = sort_by_date(aggregate_rows(rows, group_by, self.avg_order_value))
        return (
            grouped,
            calculate_summary(rows, self.avg_order_value),
            calculate_trends(grouped),
            rank_top_performers(rows, self.avg_order_value),
        )

    def run(self, query):
        """
        Answer a query from the cache or by computing it.

        Returns:
            tuple: (response dict, bool cached).
        Raises:
            ValidationError: Before any cache or store access.
            StorageError: If the fetch or the cache read fails.
        """
        validate_query(query)

        fingerprint = build_fingerprint(query, self.avg_order_value)
        entry = self.cache.get(fingerprint, query.user_id)
        if entry is not None:
            return entry.data, True

        rows = self.store.fetch_rows(
            query.user_id, query.start_date, query.end_date, query.platforms, query.campaigns,
        )
        grouped, summary, trends, top_performers = self.build_report(rows, query.group_by)

        response = AnalyticsResponse(
            analytics=tuple(grouped),
            summary=summary,
            trends=trends,
            top_performers=top_performers,
            campaigns=tuple(self.store.list_campaigns(query.user_id, query.campaigns)),
            platforms=tuple(self.store.list_platforms(query.user_id, query.platforms)),
            date_range={'startDate': query.start_date, 'endDate': query.end_date},
            group_by=query.group_by,
            metrics=tuple(query.metrics),
            total_records=len(rows),
        )
        data = response.to_dict()
        logger.debug(
            "Computed analytics for user %s: %d raw rows, %d grouped records",
            query.user_id, len(rows), len(grouped),
        )

        self.cache.set(fingerprint, query.user_id, data, filters={
            'startDate': query.start_date,
            'endDate': query.end_date,
            'platforms': list(query.platforms),
            'campaigns': list(query.campaigns),
            'metrics': list(query.metrics),
            'groupBy': query.group_by,
        })
        return data, False

