"""
ScrapJob model — the ledger row correlating one provider trigger with its webhook callback.
"""
from sqlalchemy import Column, Integer, Text, DateTime, JSON, Index
from sqlalchemy.sql import func

from influencer_tracker.database import Base


class ScrapJob(Base):
    __tablename__ = 'scrap_jobs'

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Text, nullable=False, unique=True)  # embedded in the webhook URL
    organization_id = Column(Text, nullable=False)
    user_id = Column(Text, nullable=False)
    influencer_id = Column(Integer, nullable=False)
    platform = Column(Text, nullable=False)
    job_type = Column(Text, nullable=False)      # profile / posts
    status = Column(Text, nullable=False, default='pending')
    target_url = Column(Text, nullable=True)
    job_metadata = Column('metadata', JSON, default=dict)
    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('ix_scrap_jobs_org_status', 'organization_id', 'status'),
        Index('ix_scrap_jobs_influencer_status', 'influencer_id', 'status'),
        Index('ix_scrap_jobs_status_started', 'status', 'started_at'),
    )

    def to_dict(self):
        return {
            'job_id': self.job_id,
            'organization_id': self.organization_id,
            'user_id': self.user_id,
            'influencer_id': self.influencer_id,
            'platform': self.platform,
            'job_type': self.job_type,
            'status': self.status,
            'target_url': self.target_url,
            'metadata': self.job_metadata or {},
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'error_message': self.error_message,
        }
