"""Core database models"""
from .videos import VideoMetadata
from .liked_videos import LikedVideo

__all__ = ["VideoMetadata", "LikedVideo"]
