"""SQLAlchemy async engine construction."""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine


def get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return url


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Build the pooled async engine shared by the tenant index."""
    return create_async_engine(
        get_async_url(database_url),
        echo=echo,
        pool_pre_ping=True,
    )
