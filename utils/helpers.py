from datetime import date, datetime, timedelta # For date calculations.

from analytics.errors import ValidationError
from analytics.types import AnalyticsQuery, RAW_METRICS
from analytics.validation import validate_query

# Hour of day (server time) at which scheduled reports become due.
REPORT_RUN_HOUR = 9

REPORT_FREQUENCIES = ('daily', 'weekly', 'monthly')

def split_list_param(value):
    """
    Splits a comma-separated query parameter into a tuple of non-empty values.

    Args:
        value (str, list or None): e.g. 'FACEBOOK,INSTAGRAM', ['c1', 'c2'], '' or None.

    Returns:
        tuple: The stripped values. Empty entries are dropped, so '' and ',' both
               yield an empty tuple, which callers treat as "no filter".
    """
    if not value:
        return ()
    items = value if isinstance(value, (list, tuple)) else value.split(',')
    return tuple(item.strip() for item in items if item and item.strip())

def parse_analytics_query(request_args, user_id):
    """
    Builds a validated AnalyticsQuery from request arguments.

    Expected arguments (all strings, lists comma-separated):
        startDate, endDate (required, YYYY-MM-DD, start not after end),
        platforms (FACEBOOK/INSTAGRAM, case-insensitive, empty = all),
        campaigns (campaign ids, empty = all),
        metrics (defaults to impressions, clicks, conversions, cost),
        groupBy ('day', 'week' or 'month', defaults to 'day').

    Args:
        request_args (Mapping): Typically `request.args`, or a JSON body dict.
        user_id (int): The tenant the query runs for.

    Returns:
        AnalyticsQuery: The query, checked by analytics.validation.validate_query.

    Raises:
        ValidationError: On the first missing or invalid parameter.
    """
    query = AnalyticsQuery(
        user_id=user_id,
        start_date=request_args.get('startDate'),
        end_date=request_args.get('endDate'),
        platforms=tuple(p.upper() for p in split_list_param(request_args.get('platforms'))),
        campaigns=split_list_param(request_args.get('campaigns')),
        metrics=split_list_param(request_args.get('metrics')) or RAW_METRICS,
        group_by=request_args.get('groupBy') or 'day',
    )
    validate_query(query)
    return query

def calculate_next_run(frequency, now=None):
    """
    Computes when a scheduled report is next due.

    daily   -> tomorrow at 09:00
    weekly  -> the next Monday at 09:00 (a week ahead when `now` is a Monday)
    monthly -> the first day of next month at 09:00

    Args:
        frequency (str): 'daily', 'weekly' or 'monthly'.
        now (datetime, optional): Reference time. Defaults to datetime.utcnow().

    Returns:
        datetime: The next run time (naive, same clock as `now`).
    """
    now = now or datetime.utcnow()
    today = now.date()

    if frequency == 'daily':
        run_day = today + timedelta(days=1)
    elif frequency == 'weekly':
        # weekday() is 0 for Monday, so this is 7 on a Monday and 1 on a Sunday.
        run_day = today + timedelta(days=7 - today.weekday())
    elif frequency == 'monthly':
        if today.month == 12:
            run_day = date(today.year + 1, 1, 1)
        else:
            run_day = date(today.year, today.month + 1, 1)
    else:
        raise ValidationError(
            f"Frequency must be one of: {', '.join(REPORT_FREQUENCIES)}.", field='frequency'
        )

    return datetime.combine(run_day, datetime.min.time()).replace(hour=REPORT_RUN_HOUR)
