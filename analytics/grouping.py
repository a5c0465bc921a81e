"""Time bucketing and aggregation keys for raw metric rows."""

from datetime import timedelta

from .errors import ValidationError
from .types import GROUP_BY_MODES


def bucket_date(day, group_by='day'):
    """Return the ISO date of the bucket that ``day`` falls into.

    Weeks start on Sunday; months are keyed by their first day.
    """
    if group_by == 'day':
        return day.isoformat()
    if group_by == 'week':
        # date.weekday() counts from Monday; shift so Sunday is day 0.
        days_since_sunday = (day.weekday() + 1) % 7
        return (day - timedelta(days=days_since_sunday)).isoformat()
    if group_by == 'month':
        return day.replace(day=1).isoformat()
    raise ValidationError(
        f"Unsupported groupBy '{group_by}'. Use one of: {', '.join(GROUP_BY_MODES)}.",
        field='groupBy',
    )


def aggregation_key(row, group_by='day'):
    """Single string key for the (bucket date, platform, campaign) tuple of a row."""
    return f'{bucket_date(row.date, group_by)}-{row.platform}-{row.campaign_id}'
