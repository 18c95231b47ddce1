from sqlalchemy import Column, Integer, BigInteger, Text, TIMESTAMP
from sqlalchemy.sql import func
from core.db import Base

# SQLite only autoincrements INTEGER PRIMARY KEY
IdType = BigInteger().with_variant(Integer, "sqlite")


class VideoMetadata(Base):
    """Video catalog metadata table"""
    __tablename__ = "videos_metadata"

    id = Column(IdType, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False, comment="Video title")
    description = Column(Text, comment="Video description")
    category = Column(Text, index=True, comment="Free-form category, used as equality filter")
    video_url = Column(Text, nullable=False, comment="Public URL of the video object")
    thumbnail_url = Column(Text, nullable=False, comment="Public URL of the thumbnail object")
    duration = Column(Integer, nullable=False, default=0, comment="Duration in seconds")
    views = Column(BigInteger, nullable=False, default=0, comment="View counter")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False,
                        server_default=func.now(), comment="Insert time (UTC)")
    meta_title = Column(Text, comment="SEO title override")
    meta_description = Column(Text, comment="SEO description override")
    meta_keywords = Column(Text, comment="SEO keywords")
