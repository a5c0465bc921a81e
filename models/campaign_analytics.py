from datetime import datetime
from extensions import db
from .ad_platform_integration import PlatformNameEnum # Import for typing and relationship consistency.

class CampaignAnalytics(db.Model):
    """
    Raw daily performance counters for a campaign on one platform.

    Rows are written by the Meta sync job and only read by the analytics
    engine. Derived metrics (CTR, CPC, ROI, ...) are deliberately not stored:
    they are always recomputed from these counters. Several rows may exist for
    the same campaign, platform and date; the engine sums them.
    """
    __tablename__ = 'analytics' # Specifies the database table name.

    id = db.Column(db.Integer, primary_key=True) # Unique identifier for each data record.

    # --- Foreign Keys and Platform Identification ---
    campaign_id = db.Column(db.String(36), db.ForeignKey('campaigns.id'), nullable=False, index=True)
    platform = db.Column(db.Enum(PlatformNameEnum), nullable=False, index=True)

    # --- Date of Metrics ---
    date = db.Column(db.Date, nullable=False, index=True)

    # --- Core Performance Metrics ---
    impressions = db.Column(db.Integer, default=0, nullable=False) # Number of times ads were displayed.
    clicks = db.Column(db.Integer, default=0, nullable=False)      # Number of clicks on ads.
    conversions = db.Column(db.Integer, default=0, nullable=False) # Conversions attributed to the ads.
    # Amount spent, stored as Numeric for precision (e.g., 123.45).
    cost = db.Column(db.Numeric(12, 2), default=0, nullable=False)

    # --- Timestamps ---
    created_at = db.Column(db.DateTime, default=datetime.utcnow) # When the row was ingested.

    # Composite indexes for the date-range queries the dashboard runs.
    __table_args__ = (
        db.Index('idx_analytics_campaign_date', 'campaign_id', 'date'),
        db.Index('idx_analytics_platform_date', 'platform', 'date'),
    )

    def __repr__(self):
        return f'<CampaignAnalytics {self.platform.value} - Camp: {self.campaign_id} - Date: {self.date}>'
