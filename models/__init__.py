# Import every model so that db.create_all() and Flask-Migrate see the full schema.
from .user import User, UserRoleEnum
from .ad_platform_integration import AdPlatformIntegration, PlatformNameEnum, IntegrationStatusEnum
from .campaign import Campaign, CampaignStatusEnum
from .campaign_analytics import CampaignAnalytics
from .analytics_cache import AnalyticsCache
from .scheduled_report import ScheduledReport, ReportFrequencyEnum, ReportFormatEnum
