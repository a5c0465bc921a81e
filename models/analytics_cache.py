from datetime import datetime
from extensions import db

class AnalyticsCache(db.Model):
    """
    Cached analytics responses, one row per (cache key, user).

    `data` holds the full JSON response and `filters` the query parameters it
    was computed for. Rows are upserted on the unique (cache_key, user_id)
    pair and are considered absent once `expires_at` has passed, whether or
    not they have been purged yet.
    """
    __tablename__ = 'analytics_cache'

    id = db.Column(db.Integer, primary_key=True)
    cache_key = db.Column(db.String(1024), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    data = db.Column(db.JSON, nullable=False)
    filters = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    __table_args__ = (
        db.UniqueConstraint('cache_key', 'user_id', name='uq_analytics_cache_key_user'),
        db.Index('idx_analytics_cache_user_expires', 'user_id', 'expires_at'),
    )

    def __repr__(self):
        return f'<AnalyticsCache User:{self.user_id} Key:{self.cache_key[:50]} Expires:{self.expires_at}>'
