"""Typed structures flowing through the analytics engine.

Raw rows are validated with pydantic at the storage boundary so the
aggregation code never sees partially-typed data. Everything the engine
produces is a frozen dataclass that holds only plain values (no references
back to input rows), which keeps the assembled response JSON-safe.
"""

import datetime as dt
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# Ad platforms a raw row may belong to.
PLATFORM_NAMES = ('FACEBOOK', 'INSTAGRAM')

# Metric names a query may select. The first four are the raw counters.
RAW_METRICS = ('impressions', 'clicks', 'conversions', 'cost')
DERIVED_METRICS = ('ctr', 'conversionRate', 'cpc', 'cpa', 'roi')
METRIC_NAMES = RAW_METRICS + DERIVED_METRICS

GROUP_BY_MODES = ('day', 'week', 'month')


class RawMetricRow(BaseModel):
    """One ingested observation for a campaign on a platform on a calendar day."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    platform: Literal['FACEBOOK', 'INSTAGRAM']
    campaign_id: str
    campaign_name: Optional[str] = None
    campaign_status: Optional[str] = None
    campaign_budget: float = Field(default=0.0, ge=0)

    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    conversions: int = Field(default=0, ge=0)
    cost: float = Field(default=0.0, ge=0)  # Currency units.


def _camel(name):
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def _plain(value):
    if is_dataclass(value):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class SerializableMixin:
    """Renders a dataclass as a dict with camelCase keys for the JSON API.

    A field may override its key with ``metadata={'key': ...}``; fields whose
    value is None and that set ``metadata={'omit_none': True}`` are left out.
    """

    def to_dict(self):
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.metadata.get('omit_none'):
                continue
            result[f.metadata.get('key', _camel(f.name))] = _plain(value)
        return result


@dataclass(frozen=True)
class GroupedRecord(SerializableMixin):
    """Totals for one (bucket date, platform, campaign) key plus derived metrics."""

    date: str
    platform: str
    campaign_id: str
    campaign_name: Optional[str]
    campaign_status: Optional[str]
    campaign_budget: float
    impressions: int
    clicks: int
    conversions: int
    cost: float
    ctr: float
    conversion_rate: float
    cpc: float
    cpa: float
    roi: float
    records: int  # Raw rows folded into this record.


@dataclass(frozen=True)
class SummaryStats(SerializableMixin):
    total_impressions: int = 0
    total_clicks: int = 0
    total_conversions: int = 0
    total_cost: float = 0
    avg_ctr: float = field(default=0, metadata={'key': 'avgCTR'})
    avg_conversion_rate: float = 0
    avg_cpc: float = field(default=0, metadata={'key': 'avgCPC'})
    avg_cpa: float = field(default=0, metadata={'key': 'avgCPA'})
    avg_roi: float = field(default=0, metadata={'key': 'avgROI'})
    total_campaigns: int = 0
    total_platforms: int = 0
    # Number of distinct calendar days present in the row set.
    date_range: int = 0


@dataclass(frozen=True)
class TrendDeltas(SerializableMixin):
    impressions_trend: float = 0
    clicks_trend: float = 0
    conversions_trend: float = 0
    cost_trend: float = 0
    roi_trend: float = 0


@dataclass(frozen=True)
class PerformerEntry(SerializableMixin):
    """A campaign or platform re-aggregated from raw rows. Platforms carry no id."""

    name: Optional[str]
    impressions: int
    clicks: int
    conversions: int
    cost: float
    roi: float
    id: Optional[str] = field(default=None, metadata={'omit_none': True})


@dataclass(frozen=True)
class TopPerformers(SerializableMixin):
    top_campaigns: tuple = ()
    top_platforms: tuple = ()
    best_roi: tuple = field(default=(), metadata={'key': 'bestROI'})
    highest_conversions: tuple = ()


@dataclass(frozen=True)
class CampaignInfo(SerializableMixin):
    id: str
    name: str
    status: Optional[str]
    budget: float
    start_date: Optional[str]
    end_date: Optional[str]
    created_at: Optional[str]
    analytics_count: int

    @property
    def has_analytics(self):
        return self.analytics_count > 0

    def to_dict(self):
        data = super().to_dict()
        data['hasAnalytics'] = self.has_analytics
        return data


@dataclass(frozen=True)
class PlatformInfo(SerializableMixin):
    id: int
    name: str
    account_id: Optional[str]
    display_name: str
    analytics_count: int

    def to_dict(self):
        data = super().to_dict()
        data['hasAnalytics'] = self.analytics_count > 0
        return data


@dataclass(frozen=True)
class AnalyticsQuery:
    """A validated analytics request. Empty filter tuples mean "no filter"."""

    user_id: int
    start_date: str
    end_date: str
    platforms: tuple = ()
    campaigns: tuple = ()
    metrics: tuple = RAW_METRICS
    group_by: str = 'day'


@dataclass(frozen=True)
class AnalyticsResponse(SerializableMixin):
    analytics: tuple
    summary: SummaryStats
    trends: TrendDeltas
    top_performers: TopPerformers
    campaigns: tuple
    platforms: tuple
    date_range: dict
    group_by: str
    metrics: tuple
    total_records: int
