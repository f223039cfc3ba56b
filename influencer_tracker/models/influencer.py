"""
Influencer model — one row per tracked account, unique per (organization, platform, handle).

Profile columns are a denormalized cache filled in by ProfileSyncService; the
two is_*_syncing flags guard against double-triggering a scrape.
"""
from sqlalchemy import Column, Integer, Text, Boolean, DateTime, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from influencer_tracker.database import Base


class Influencer(Base):
    __tablename__ = 'influencers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    platform = Column(Text, nullable=False)
    handle = Column(Text, nullable=False)
    organization_id = Column(Text, nullable=False)
    user_id = Column(Text, nullable=False, index=True)
    platform_user_id = Column(Text, nullable=True)
    avatar_url = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    follower_count = Column(Integer, nullable=True)
    verified = Column(Boolean, nullable=False, default=False)
    last_profile_sync = Column(DateTime(timezone=True), nullable=True)
    is_post_syncing = Column(Boolean, nullable=False, default=False)
    is_profile_syncing = Column(Boolean, nullable=False, default=False)
    last_sync_attempt = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    posts = relationship(
        'Post',
        back_populates='influencer',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        UniqueConstraint('organization_id', 'platform', 'handle', name='uq_influencer_org_platform_handle'),
        Index('ix_influencers_sync_flags', 'is_post_syncing', 'is_profile_syncing'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'platform': self.platform,
            'handle': self.handle,
            'organization_id': self.organization_id,
            'user_id': self.user_id,
            'platform_user_id': self.platform_user_id,
            'avatar_url': self.avatar_url,
            'bio': self.bio,
            'location': self.location,
            'follower_count': self.follower_count,
            'verified': bool(self.verified),
            'is_post_syncing': bool(self.is_post_syncing),
            'is_profile_syncing': bool(self.is_profile_syncing),
            'last_profile_sync': self.last_profile_sync.isoformat() if self.last_profile_sync else None,
            'last_sync_attempt': self.last_sync_attempt.isoformat() if self.last_sync_attempt else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
