from .base import Base
from .session import create_engine, get_async_url
from .models import TenantChunkModel

__all__ = [
    "Base",
    "create_engine",
    "get_async_url",
    "TenantChunkModel",
]
