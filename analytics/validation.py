"""Checks an AnalyticsQuery before any cache or store access.

Shared by the HTTP parameter parser and the engine, so a query built by
hand gets the same ValidationError as one parsed from a request.
"""

from datetime import datetime

from .errors import ValidationError
from .types import GROUP_BY_MODES, METRIC_NAMES, PLATFORM_NAMES


def parse_iso_date(value, field):
    """Parse a strict ``YYYY-MM-DD`` string into a date."""
    try:
        parsed = datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        parsed = None
    # strptime also accepts unpadded parts such as '2024-1-5'.
    if parsed is None or parsed.isoformat() != value:
        raise ValidationError(f"Invalid {field} '{value}'. Please use YYYY-MM-DD.", field=field)
    return parsed


def validate_query(query):
    """
    Raise ValidationError for the first missing or invalid field of ``query``.

    Platform names must already be upper case. Empty platform, campaign and
    metric tuples are valid and mean "no filter" / "nothing selected".

    Returns:
        tuple: The parsed (start, end) dates.
    """
    if not (query.start_date and query.end_date):
        raise ValidationError("Start date and end date are required.", field='startDate')

    start = parse_iso_date(query.start_date, 'startDate')
    end = parse_iso_date(query.end_date, 'endDate')
    if start > end:
        raise ValidationError("Start date cannot be after end date.", field='startDate')

    unknown_platforms = [p for p in query.platforms if p not in PLATFORM_NAMES]
    if unknown_platforms:
        raise ValidationError(
            f"Invalid platform: '{unknown_platforms[0]}'. Supported values are {', '.join(PLATFORM_NAMES)}.",
            field='platforms',
        )

    unknown_metrics = [m for m in query.metrics if m not in METRIC_NAMES]
    if unknown_metrics:
        raise ValidationError(
            f"Invalid metric: '{unknown_metrics[0]}'. Supported values are {', '.join(METRIC_NAMES)}.",
            field='metrics',
        )

    if query.group_by not in GROUP_BY_MODES:
        raise ValidationError(
            f"Unsupported groupBy '{query.group_by}'. Use one of: {', '.join(GROUP_BY_MODES)}.",
            field='groupBy',
        )
    return start, end
