import pytest
from datetime import datetime

from analytics.errors import ValidationError
from analytics.types import RAW_METRICS
from utils.helpers import calculate_next_run, parse_analytics_query, split_list_param

# parse_analytics_query takes any mapping, so plain dicts stand in for request.args.

def test_split_list_param():
    assert split_list_param('FACEBOOK, INSTAGRAM') == ('FACEBOOK', 'INSTAGRAM')
    assert split_list_param(['c1', ' c2 ']) == ('c1', 'c2')
    assert split_list_param('') == ()
    assert split_list_param(',') == ()
    assert split_list_param(None) == ()

def test_parse_minimal_query_uses_defaults():
    query = parse_analytics_query({'startDate': '2024-01-01', 'endDate': '2024-01-31'}, user_id=3)
    assert query.user_id == 3
    assert (query.start_date, query.end_date) == ('2024-01-01', '2024-01-31')
    assert query.platforms == ()
    assert query.campaigns == ()
    assert query.metrics == RAW_METRICS
    assert query.group_by == 'day'

def test_parse_full_query():
    query = parse_analytics_query({
        'startDate': '2024-01-01',
        'endDate': '2024-01-01', # A single-day range is valid.
        'platforms': 'facebook,INSTAGRAM',
        'campaigns': 'c1,c2',
        'metrics': 'ctr,roi',
        'groupBy': 'month',
    }, user_id=3)
    assert query.platforms == ('FACEBOOK', 'INSTAGRAM')
    assert query.campaigns == ('c1', 'c2')
    assert query.metrics == ('ctr', 'roi')
    assert query.group_by == 'month'

@pytest.mark.parametrize("args, field", [
    ({}, 'startDate'),
    ({'startDate': '2024-01-01'}, 'startDate'),
    ({'startDate': '2024-13-01', 'endDate': '2024-12-31'}, 'startDate'),
    ({'startDate': '2024-1-5', 'endDate': '2024-12-31'}, 'startDate'),
    ({'startDate': '2024-01-01', 'endDate': 'tomorrow'}, 'endDate'),
    ({'startDate': '2024-02-01', 'endDate': '2024-01-01'}, 'startDate'),
    ({'startDate': '2024-01-01', 'endDate': '2024-01-31', 'platforms': 'GOOGLE'}, 'platforms'),
    ({'startDate': '2024-01-01', 'endDate': '2024-01-31', 'metrics': 'revenue'}, 'metrics'),
    ({'startDate': '2024-01-01', 'endDate': '2024-01-31', 'groupBy': 'hour'}, 'groupBy'),
])
def test_parse_rejects_invalid_arguments(args, field):
    with pytest.raises(ValidationError) as excinfo:
        parse_analytics_query(args, user_id=1)
    assert excinfo.value.field == field

def test_start_after_end_message():
    with pytest.raises(ValidationError, match="Start date cannot be after end date."):
        parse_analytics_query({'startDate': '2024-02-01', 'endDate': '2024-01-01'}, user_id=1)

@pytest.mark.parametrize("frequency, now, expected", [
    ('daily', datetime(2024, 1, 10, 15, 30), datetime(2024, 1, 11, 9, 0)),
    ('daily', datetime(2024, 12, 31, 23, 59), datetime(2025, 1, 1, 9, 0)),
    ('weekly', datetime(2024, 1, 10, 8, 0), datetime(2024, 1, 15, 9, 0)),  # Wednesday -> next Monday
    ('weekly', datetime(2024, 1, 15, 8, 0), datetime(2024, 1, 22, 9, 0)),  # Monday -> following Monday
    ('weekly', datetime(2024, 1, 14, 8, 0), datetime(2024, 1, 15, 9, 0)),  # Sunday -> next day
    ('monthly', datetime(2024, 1, 31, 10, 0), datetime(2024, 2, 1, 9, 0)),
    ('monthly', datetime(2024, 12, 15, 10, 0), datetime(2025, 1, 1, 9, 0)),
])
def test_calculate_next_run(frequency, now, expected):
    assert calculate_next_run(frequency, now=now) == expected

def test_calculate_next_run_rejects_unknown_frequency():
    with pytest.raises(ValidationError):
        calculate_next_run('hourly', now=datetime(2024, 1, 1))
