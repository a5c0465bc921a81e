"""SQLAlchemy-backed storage collaborator for the analytics engine.

The store is constructed around a session supplied by the host application
(``db.session`` under Flask-SQLAlchemy) and never opens or closes it. All
SQLAlchemy failures surface as StorageError after the session is rolled back.
"""

from datetime import date
from functools import wraps

import pydantic
from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from models import (
    AdPlatformIntegration,
    AnalyticsCache,
    Campaign,
    CampaignAnalytics,
    PlatformNameEnum,
)

from .cache import CacheEntry
from .errors import StorageError
from .types import CampaignInfo, PlatformInfo, RawMetricRow

# Dialects whose INSERT supports ON CONFLICT DO UPDATE.
_UPSERT_INSERTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


def _storage_operation(description):
    """Roll back and re-raise SQLAlchemy errors from a store method as StorageError."""
    def decorator(method):
        @wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except SQLAlchemyError as e:
                self.session.rollback()
                raise StorageError(f"Failed to {description}: {e}", original=e) from e
        return wrapper
    return decorator


def _isoformat(value):
    return value.isoformat() if value is not None else None


def _to_date(value):
    return value if isinstance(value, date) else date.fromisoformat(value)


class SQLAlchemyAnalyticsStore:
    """Raw-row fetch, campaign/platform listings and the analytics cache table."""

    def __init__(self, session):
        self.session = session

    # --- Raw rows ---

    @_storage_operation("fetch analytics rows")
    def fetch_rows(self, user_id, start_date, end_date, platforms=(), campaigns=()):
        """
        Raw rows for campaigns owned by ``user_id`` within the inclusive date range.

        Empty ``platforms`` / ``campaigns`` mean no filter on that dimension.
        Rows come back newest first, then by campaign name and platform, each
        validated into a RawMetricRow.
        """
        query = self.session.query(
            CampaignAnalytics.date,
            CampaignAnalytics.platform,
            CampaignAnalytics.campaign_id,
            Campaign.name.label('campaign_name'),
            Campaign.status.label('campaign_status'),
            Campaign.budget.label('campaign_budget'),
            CampaignAnalytics.impressions,
            CampaignAnalytics.clicks,
            CampaignAnalytics.conversions,
            CampaignAnalytics.cost,
        ).join(Campaign, CampaignAnalytics.campaign_id == Campaign.id).filter(
            Campaign.created_by == user_id,
            CampaignAnalytics.date >= _to_date(start_date),
            CampaignAnalytics.date <= _to_date(end_date),
        )
        if platforms:
            query = query.filter(CampaignAnalytics.platform.in_([PlatformNameEnum(p) for p in platforms]))
        if campaigns:
            query = query.filter(CampaignAnalytics.campaign_id.in_(list(campaigns)))
        query = query.order_by(CampaignAnalytics.date.desc(), Campaign.name, CampaignAnalytics.platform)

        return [self._to_raw_row(result) for result in query.all()]

    @staticmethod
    def _to_raw_row(result):
        try:
            return RawMetricRow(
                date=result.date,
                platform=result.platform.value,
                campaign_id=result.campaign_id,
                campaign_name=result.campaign_name,
                campaign_status=result.campaign_status.value if result.campaign_status else None,
                campaign_budget=float(result.campaign_budget or 0),
                impressions=result.impressions or 0,
                clicks=result.clicks or 0,
                conversions=result.conversions or 0,
                cost=float(result.cost or 0),
            )
        except pydantic.ValidationError as e:
            raise StorageError(
                f"Invalid analytics row for campaign {result.campaign_id} on {result.date}: {e}",
                original=e,
            ) from e

    # --- Listings ---

    @_storage_operation("list campaigns")
    def list_campaigns(self, user_id, campaign_filter=()):
        """The user's campaigns, newest first, with their analytics row counts."""
        counts = self.session.query(
            CampaignAnalytics.campaign_id,
            func.count(CampaignAnalytics.id).label('analytics_count'),
        ).group_by(CampaignAnalytics.campaign_id).subquery()

        query = self.session.query(
            Campaign, func.coalesce(counts.c.analytics_count, 0),
        ).outerjoin(counts, counts.c.campaign_id == Campaign.id).filter(Campaign.created_by == user_id)
        if campaign_filter:
            query = query.filter(Campaign.id.in_(list(campaign_filter)))
        query = query.order_by(Campaign.created_at.desc())

        return [
            CampaignInfo(
                id=campaign.id,
                name=campaign.name,
                status=campaign.status.value if campaign.status else None,
                budget=float(campaign.budget or 0),
                start_date=_isoformat(campaign.start_date),
                end_date=_isoformat(campaign.end_date),
                created_at=_isoformat(campaign.created_at),
                analytics_count=analytics_count,
            )
            for campaign, analytics_count in query.all()
        ]

    @_storage_operation("list platforms")
    def list_platforms(self, user_id, platform_filter=()):
        """The user's connected ad accounts, with analytics row counts per platform."""
        counts = dict(
            self.session.query(CampaignAnalytics.platform, func.count(CampaignAnalytics.id))
            .join(Campaign, CampaignAnalytics.campaign_id == Campaign.id)
            .filter(Campaign.created_by == user_id)
            .group_by(CampaignAnalytics.platform)
            .all()
        )

        query = self.session.query(AdPlatformIntegration).filter(AdPlatformIntegration.user_id == user_id)
        if platform_filter:
            query = query.filter(
                AdPlatformIntegration.platform_name.in_([PlatformNameEnum(p) for p in platform_filter])
            )

        return [
            PlatformInfo(
                id=integration.id,
                name=integration.platform_name.value,
                account_id=integration.ad_account_id,
                display_name=integration.platform_name.display_name,
                analytics_count=counts.get(integration.platform_name, 0),
            )
            for integration in query.order_by(AdPlatformIntegration.id).all()
        ]

    # --- Cache table ---

    @_storage_operation("read analytics cache")
    def cache_get(self, key, user_id):
        """The stored entry for the key, expired or not. Expiry is the caller's check."""
        row = self.session.query(AnalyticsCache).filter_by(cache_key=key, user_id=user_id).first()
        if row is None:
            return None
        return CacheEntry(key=row.cache_key, user_id=row.user_id, data=row.data,
                          expires_at=row.expires_at, created_at=row.created_at)

    @_storage_operation("write analytics cache")
    def cache_set(self, key, user_id, data, filters, expires_at):
        """Insert or replace the entry for (key, user_id)."""
        dialect = self.session.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is not None:
            stmt = insert(AnalyticsCache.__table__).values(
                cache_key=key, user_id=user_id, data=data, filters=filters, expires_at=expires_at,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=['cache_key', 'user_id'],
                set_={
                    'data': stmt.excluded.data,
                    'filters': stmt.excluded.filters,
                    'expires_at': stmt.excluded.expires_at,
                },
            )
            self.session.execute(stmt)
        else:
            row = self.session.query(AnalyticsCache).filter_by(cache_key=key, user_id=user_id).first()
            if row is None:
                row = AnalyticsCache(cache_key=key, user_id=user_id)
                self.session.add(row)
            row.data, row.filters, row.expires_at = data, filters, expires_at
        self.session.commit()

    @_storage_operation("purge expired analytics cache")
    def cache_purge_expired(self, now):
        removed = self.session.query(AnalyticsCache).filter(
            AnalyticsCache.expires_at < now
        ).delete(synchronize_session=False)
        self.session.commit()
        return removed

    @_storage_operation("clear user analytics cache")
    def cache_clear_user(self, user_id):
        removed = self.session.query(AnalyticsCache).filter(
            AnalyticsCache.user_id == user_id
        ).delete(synchronize_session=False)
        self.session.commit()
        return removed

    @_storage_operation("clear analytics cache")
    def cache_clear_all(self):
        removed = self.session.query(AnalyticsCache).delete(synchronize_session=False)
        self.session.commit()
        return removed

    @_storage_operation("read analytics cache statistics")
    def cache_stats(self, now):
        total, oldest, newest = self.session.query(
            func.count(AnalyticsCache.id),
            func.min(AnalyticsCache.created_at),
            func.max(AnalyticsCache.created_at),
        ).one()
        expired = self.session.query(func.count(AnalyticsCache.id)).filter(
            AnalyticsCache.expires_at < now
        ).scalar()
        return {
            'totalEntries': total or 0,
            'expiredEntries': expired or 0,
            'activeEntries': (total or 0) - (expired or 0),
            'oldestEntry': _isoformat(oldest),
            'newestEntry': _isoformat(newest),
        }
