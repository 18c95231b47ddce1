from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration from environment"""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    database_url: str


# Base class for models
Base = declarative_base()


def create_engine_from_settings(settings: DatabaseSettings) -> AsyncEngine:
    """Create the async SQLAlchemy engine for the catalog database"""
    kwargs = {}
    if not settings.database_url.startswith("sqlite"):
        kwargs.update(pool_pre_ping=True, pool_recycle=300)
    return create_async_engine(settings.database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory bound to the engine"""
    return async_sessionmaker(engine, autoflush=False, expire_on_commit=False)
