"""SQLAlchemy ORM model for tenant chunks with pgvector embeddings."""

import uuid

from sqlalchemy import Column, DateTime, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB

from pgvector.sqlalchemy import Vector

from sourcerag.config import get_settings
from sourcerag.infrastructure.database.base import Base

EMBEDDING_DIMENSIONS = get_settings().embedding_dimensions


class TenantChunkModel(Base):
    """One indexed chunk, owned by exactly one tenant.

    Rows are written once during ingestion and only ever removed in bulk by
    ``tenant_id``. ``metadata`` keeps the full flattened source metadata;
    ``tenant_id``, ``source_type`` and ``source_id`` are also broken out into
    indexed columns so filtered search does not touch the JSON.
    """

    __tablename__ = "tenant_chunks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    collection = Column(String(128), nullable=False, index=True)
    tenant_id = Column(String(255), nullable=False, index=True)
    source_type = Column(String(20), nullable=False, index=True)  # "pdf", "website", "youtube"
    source_id = Column(String(64), nullable=False, index=True)
    content = Column(Text, nullable=False)
    embedding = Column(Vector(EMBEDDING_DIMENSIONS), nullable=False)
    metadata_ = Column("metadata", JSONB, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_tenant_chunks_collection_tenant", "collection", "tenant_id"),
        Index("idx_tenant_chunks_embedding_hnsw", embedding, postgresql_using="hnsw",
              postgresql_ops={"embedding": "vector_cosine_ops"}),
    )
