from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from service.feed_service import FeedMode


class ApiSettings(BaseSettings):
    """HTTP layer configuration from environment"""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    host: str = "0.0.0.0"
    port: int = 5000
    frontend_url: str = "http://localhost:3000"
    feed_mode: FeedMode = FeedMode.RANDOM
    feed_page_size: int = Field(default=10, ge=1)
    log_level: str = "INFO"
    cors_origins: str = "*"

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
