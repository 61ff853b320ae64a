from .tenant_chunk_models import TenantChunkModel

__all__ = ["TenantChunkModel"]
