from .tenant_chunk_index import PgVectorTenantIndex

__all__ = ["PgVectorTenantIndex"]
