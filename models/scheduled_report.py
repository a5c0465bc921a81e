import enum
import uuid
from datetime import datetime
from extensions import db

class ReportFrequencyEnum(enum.Enum):
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'

class ReportFormatEnum(enum.Enum):
    CSV = 'csv'
    PDF = 'pdf'

class ScheduledReport(db.Model):
    """
    A recurring analytics report e-mailed to a list of recipients.

    `filters` stores the analytics query parameters (platforms, campaigns,
    metrics, groupBy) the report is generated with. `next_run` is the next
    time the report is due; the delivery job advances it after each run.
    """
    __tablename__ = 'scheduled_reports'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    frequency = db.Column(db.Enum(ReportFrequencyEnum), nullable=False)
    recipients = db.Column(db.JSON, nullable=False) # List of e-mail addresses.
    format = db.Column(db.Enum(ReportFormatEnum), nullable=False)
    include_charts = db.Column(db.Boolean, default=False, nullable=False)
    filters = db.Column(db.JSON, nullable=True)
    timezone = db.Column(db.String(50), default='UTC', nullable=False)
    next_run = db.Column(db.DateTime, nullable=False, index=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'frequency': self.frequency.value,
            'recipients': self.recipients,
            'format': self.format.value,
            'includeCharts': self.include_charts,
            'filters': self.filters or {},
            'timezone': self.timezone,
            'nextRun': self.next_run.isoformat() if self.next_run else None,
            'isActive': self.is_active,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<ScheduledReport {self.name} ({self.frequency.value}) User:{self.user_id}>'
