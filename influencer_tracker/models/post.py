"""
Post model — deduplicated system-wide by platform_post_id.
"""
from sqlalchemy import Column, Integer, Text, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from influencer_tracker.database import Base


class Post(Base):
    __tablename__ = 'posts'

    id = Column(Integer, primary_key=True, autoincrement=True)
    influencer_id = Column(Integer, ForeignKey('influencers.id', ondelete='CASCADE'), nullable=False)
    platform_post_id = Column(Text, nullable=False, unique=True)  # provider-native id
    content = Column(Text, default='')
    media_urls = Column(JSON, default=list)
    post_url = Column(Text, default='')
    likes = Column(Integer, default=0)
    comments = Column(Integer, default=0)
    shares = Column(Integer, default=0)
    posted_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    influencer = relationship('Influencer', back_populates='posts')

    __table_args__ = (
        Index('ix_posts_influencer_posted_at', 'influencer_id', 'posted_at'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'influencer_id': self.influencer_id,
            'platform_post_id': self.platform_post_id,
            'content': self.content or '',
            'media_urls': self.media_urls or [],
            'post_url': self.post_url or '',
            'likes': self.likes or 0,
            'comments': self.comments or 0,
            'shares': self.shares or 0,
            'posted_at': self.posted_at.isoformat() if self.posted_at else None,
        }
