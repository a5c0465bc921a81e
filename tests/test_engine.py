import json
import pytest

from analytics.cache import ResultCache
from analytics.engine import AnalyticsEngine
from analytics.errors import ValidationError
from analytics.types import AnalyticsQuery, CampaignInfo, PlatformInfo
from fakes import FakeAnalyticsStore, FakeClock, make_row

ROWS = [
    make_row(day='2024-01-02', platform='FACEBOOK', campaign_id='c1', impressions=2000, clicks=80, conversions=4, cost=40.0),
    make_row(day='2024-01-01', platform='FACEBOOK', campaign_id='c1', impressions=1000, clicks=50, conversions=5, cost=25.0),
    make_row(day='2024-01-01', platform='INSTAGRAM', campaign_id='c2', impressions=400, clicks=10, conversions=1, cost=8.0),
    make_row(day='2024-03-01', platform='INSTAGRAM', campaign_id='c2', impressions=1, clicks=1, conversions=1, cost=1.0),
]

CAMPAIGNS = [
    CampaignInfo(id='c1', name='Campaign c1', status='ACTIVE', budget=500.0, start_date=None,
                 end_date=None, created_at='2024-01-01T00:00:00', analytics_count=2),
    CampaignInfo(id='c2', name='Campaign c2', status='PAUSED', budget=0.0, start_date=None,
                 end_date=None, created_at='2023-12-01T00:00:00', analytics_count=0),
]

PLATFORMS = [PlatformInfo(id=1, name='FACEBOOK', account_id='act_1', display_name='Facebook', analytics_count=2)]

@pytest.fixture
def store():
    return FakeAnalyticsStore(rows=ROWS, campaigns=CAMPAIGNS, platforms=PLATFORMS)

@pytest.fixture
def engine(store):
    return AnalyticsEngine(store, cache=ResultCache(store, clock=FakeClock()))

def _query(**overrides):
    params = dict(user_id=1, start_date='2024-01-01', end_date='2024-01-31')
    params.update(overrides)
    return AnalyticsQuery(**params)

def test_run_assembles_full_response(engine):
    data, cached = engine.run(_query())

    assert cached is False
    assert set(data) == {
        'analytics', 'summary', 'trends', 'topPerformers', 'campaigns', 'platforms',
        'dateRange', 'groupBy', 'metrics', 'totalRecords',
    }
    assert data['totalRecords'] == 3 # The March row is outside the range.
    assert [r['date'] for r in data['analytics']] == ['2024-01-01', '2024-01-01', '2024-01-02']
    assert data['summary']['totalImpressions'] == 3400
    assert data['dateRange'] == {'startDate': '2024-01-01', 'endDate': '2024-01-31'}
    assert data['groupBy'] == 'day'
    assert data['metrics'] == ['impressions', 'clicks', 'conversions', 'cost']
    assert data['campaigns'][0]['hasAnalytics'] is True
    assert data['campaigns'][1]['hasAnalytics'] is False
    assert data['platforms'][0]['displayName'] == 'Facebook'
    json.dumps(data) # The response is plain JSON data.

def test_grouped_totals_match_raw_totals(engine):
    data, _ = engine.run(_query(group_by='month'))
    assert sum(r['impressions'] for r in data['analytics']) == data['summary']['totalImpressions']
    assert sum(r['clicks'] for r in data['analytics']) == data['summary']['totalClicks']
    assert sum(r['conversions'] for r in data['analytics']) == data['summary']['totalConversions']

def test_second_identical_query_is_served_from_cache(engine, store):
    first, cached_first = engine.run(_query())
    second, cached_second = engine.run(_query())

    assert (cached_first, cached_second) == (False, True)
    assert second == first
    assert len(store.fetch_calls) == 1

def test_rerunning_without_cache_is_idempotent(store):
    engine = AnalyticsEngine(store, cache=ResultCache(store, ttl_minutes=0, clock=FakeClock()))
    first, _ = engine.run(_query())
    second, cached = engine.run(_query())
    assert cached is False
    assert second == first

def test_empty_platform_filter_means_all_platforms(engine, store):
    data, _ = engine.run(_query(platforms=()))
    assert {r['platform'] for r in data['analytics']} == {'FACEBOOK', 'INSTAGRAM'}
    assert store.fetch_calls[0][3] == ()

def test_platform_filter_is_passed_to_store(engine):
    data, _ = engine.run(_query(platforms=('INSTAGRAM',)))
    assert {r['platform'] for r in data['analytics']} == {'INSTAGRAM'}
    assert data['summary']['totalPlatforms'] == 1

def test_empty_result_is_not_an_error(engine):
    data, cached = engine.run(_query(start_date='2025-01-01', end_date='2025-01-31'))
    assert cached is False
    assert data['analytics'] == []
    assert data['summary']['totalImpressions'] == 0
    assert data['summary']['avgCTR'] == 0
    assert set(data['trends'].values()) == {0}
    assert data['topPerformers'] == {'topCampaigns': [], 'topPlatforms': [], 'bestROI': [], 'highestConversions': []}

@pytest.mark.parametrize("overrides", [
    {'start_date': ''},
    {'end_date': None},
    {'group_by': 'year'},
    {'start_date': '2024/01/01'},
    {'end_date': '2024-02-30'},
    {'start_date': '2024-02-01', 'end_date': '2024-01-01'},
    {'platforms': ('facebook',)},
    {'platforms': ('TIKTOK',)},
    {'metrics': ('revenue',)},
])
def test_invalid_query_fails_before_cache_or_store(engine, store, overrides):
    with pytest.raises(ValidationError):
        engine.run(_query(**overrides))
    assert store.cache_reads == 0
    assert store.fetch_calls == []

def test_cache_write_failure_still_returns_data(engine, store):
    store.fail_writes = True
    data, cached = engine.run(_query())
    assert cached is False
    assert data['totalRecords'] == 3

def test_build_report_is_pure(engine):
    first = engine.build_report(ROWS, 'week')
    second = engine.build_report(ROWS, 'week')
    assert first == second

def test_engine_uses_configured_average_order_value(store):
    engine = AnalyticsEngine(store, cache=ResultCache(store, clock=FakeClock()), avg_order_value=10)
    data, _ = engine.run(_query(campaigns=('c2',)))
    # 1 conversion worth 10 against 8 spent.
    assert data['summary']['avgROI'] == 25.0

def test_changed_average_order_value_misses_the_cache(store):
    cache = ResultCache(store, clock=FakeClock())
    default_data, _ = AnalyticsEngine(store, cache=cache).run(_query(campaigns=('c2',)))
    data, cached = AnalyticsEngine(store, cache=cache, avg_order_value=10).run(_query(campaigns=('c2',)))

    assert cached is False
    assert data['summary']['avgROI'] == 25.0
    assert default_data['summary']['avgROI'] != data['summary']['avgROI']
    assert len(store.fetch_calls) == 2
