import enum
import uuid
from datetime import datetime
from extensions import db

class CampaignStatusEnum(enum.Enum):
    """
    Lifecycle status of an ad campaign.
    """
    DRAFT = 'DRAFT'
    SCHEDULED = 'SCHEDULED'
    ACTIVE = 'ACTIVE'
    PAUSED = 'PAUSED'
    COMPLETED = 'COMPLETED'

class Campaign(db.Model):
    """
    An ad campaign owned by a single user.

    Ownership (`created_by`) is what scopes analytics rows to a tenant:
    a user only ever sees analytics for campaigns they created.
    """
    __tablename__ = 'campaigns'

    # String UUID, also used as the campaign id in the analytics API.
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    status = db.Column(db.Enum(CampaignStatusEnum), nullable=False, default=CampaignStatusEnum.DRAFT, index=True)
    # Total budget in currency units, stored as Numeric for precision.
    budget = db.Column(db.Numeric(12, 2), default=0)
    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Raw analytics rows ingested for this campaign.
    analytics = db.relationship('CampaignAnalytics', backref='campaign', lazy='dynamic', cascade='all, delete-orphan')

    __table_args__ = (
        db.Index('idx_campaigns_created_by_status', 'created_by', 'status'),
    )

    def __repr__(self):
        return f'<Campaign {self.name} ({self.status.value}) Owner:{self.created_by}>'
