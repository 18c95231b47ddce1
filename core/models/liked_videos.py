from sqlalchemy import Column, BigInteger, Integer, Text, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from core.db import Base
from core.models.videos import IdType


class LikedVideo(Base):
    """Like presence rows: one row per (user, video) means liked"""
    __tablename__ = "liked_videos"

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False, comment="Liking user")
    video_id = Column(BigInteger().with_variant(Integer, "sqlite"),
                      ForeignKey("videos_metadata.id", ondelete="CASCADE"),
                      nullable=False, index=True, comment="Reference to video")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "video_id", name="uq_liked_videos_user_video"),
    )
