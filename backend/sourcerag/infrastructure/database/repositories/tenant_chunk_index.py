"""PostgreSQL + pgvector implementation of the TenantIndex port."""

import asyncio
import logging
from contextlib import contextmanager

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from sourcerag.application.interfaces.tenant_index import TenantIndex
from sourcerag.domain.entities import Chunk, RetrievalFilter, ScoredChunk
from sourcerag.domain.exceptions import IndexUnavailableError
from sourcerag.infrastructure.database.base import Base
from sourcerag.infrastructure.database.models.tenant_chunk_models import TenantChunkModel
from sourcerag.infrastructure.database.session import create_engine

logger = logging.getLogger(__name__)

_DEFAULT_COLLECTION = "rag_collection"


@contextmanager
def _translate_errors(operation: str):
    """Turn driver/connection failures into IndexUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError, OSError) as e:
        logger.error("Tenant index %s failed: %s", operation, e)
        raise IndexUnavailableError(operation, str(e)) from e


class PgVectorTenantIndex(TenantIndex):
    """Tenant-partitioned chunk store backed by one pgvector table.

    The schema is created lazily on first use (or on ``connect``). The
    initialization runs exactly once even when several requests hit a cold
    index at the same time.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: AsyncEngine | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        collection_name: str = _DEFAULT_COLLECTION,
        echo: bool = False,
    ):
        if engine is None and database_url is None:
            raise ValueError("PgVectorTenantIndex needs a database_url or an engine")
        self._engine = engine or create_engine(database_url, echo=echo)
        self._session_factory = session_factory or async_sessionmaker(
            self._engine, class_=AsyncSession, expire_on_commit=False
        )
        self._collection = collection_name
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    @property
    def collection_name(self) -> str:
        return self._collection

    @property
    def ready(self) -> bool:
        return self._schema_ready

    # ── Lifecycle ────────────────────────────────────────────────────

    async def connect(self) -> None:
        await self._ensure_schema()
        logger.info("Connected to tenant index (collection=%s)", self._collection)

    async def close(self) -> None:
        await self._engine.dispose()
        logger.info("Tenant index connections closed")

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            with _translate_errors("initialize"):
                async with self._engine.begin() as conn:
                    await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
                    await conn.run_sync(
                        Base.metadata.create_all, tables=[TenantChunkModel.__table__]
                    )
            self._schema_ready = True
            logger.info("Tenant index schema ready (table=%s)", TenantChunkModel.__tablename__)

    # ── Writes ───────────────────────────────────────────────────────

    async def add(self, chunks: list[Chunk]) -> int:
        """Append embedded chunks; each row carries its own tenant_id."""
        if not chunks:
            return 0
        for chunk in chunks:
            if not chunk.embedding:
                raise ValueError("Cannot index a chunk without an embedding")
            if not chunk.tenant_id:
                raise ValueError("Cannot index a chunk without a tenant_id")

        await self._ensure_schema()
        models = [self._to_model(chunk) for chunk in chunks]

        with _translate_errors("add"):
            async with self._session_factory() as session:
                session.add_all(models)
                await session.commit()

        logger.info("Stored %d chunks for tenant %s", len(models), chunks[0].tenant_id)
        return len(models)

    async def delete_by_tenant(self, tenant_id: str) -> int:
        await self._ensure_schema()
        statement = delete(TenantChunkModel).where(
            TenantChunkModel.collection == self._collection,
            TenantChunkModel.tenant_id == tenant_id,
        )
        with _translate_errors("delete"):
            async with self._session_factory() as session:
                result = await session.execute(statement)
                await session.commit()

        count = result.rowcount or 0
        logger.info("Deleted %d chunks for tenant %s", count, tenant_id)
        return count

    # ── Reads ────────────────────────────────────────────────────────

    async def search(
        self,
        query_vector: list[float],
        k: int,
        retrieval_filter: RetrievalFilter,
    ) -> list[ScoredChunk]:
        """Cosine-similarity search restricted to the filter, best match first."""
        if k <= 0:
            return []
        await self._ensure_schema()
        statement = self.build_search_statement(query_vector, k, retrieval_filter)

        with _translate_errors("search"):
            async with self._session_factory() as session:
                rows = (await session.execute(statement)).all()

        return [
            ScoredChunk(
                chunk=Chunk(content=row.content, metadata=dict(row.metadata or {})),
                score=1.0 - float(row.distance),
            )
            for row in rows
        ]

    async def count(self, tenant_id: str | None = None) -> int:
        await self._ensure_schema()
        statement = (
            select(func.count())
            .select_from(TenantChunkModel)
            .where(TenantChunkModel.collection == self._collection)
        )
        if tenant_id is not None:
            statement = statement.where(TenantChunkModel.tenant_id == tenant_id)

        with _translate_errors("count"):
            async with self._session_factory() as session:
                return int((await session.execute(statement)).scalar_one())

    def build_search_statement(
        self,
        query_vector: list[float],
        k: int,
        retrieval_filter: RetrievalFilter,
    ):
        """The SELECT used by ``search``; the filter is always part of the WHERE clause."""
        distance = TenantChunkModel.embedding.cosine_distance(query_vector).label("distance")
        statement = (
            select(
                TenantChunkModel.content,
                TenantChunkModel.metadata_.label("metadata"),
                distance,
            )
            .where(TenantChunkModel.collection == self._collection)
            .where(TenantChunkModel.tenant_id == retrieval_filter.tenant_id)
        )
        if retrieval_filter.source_type is not None:
            statement = statement.where(
                TenantChunkModel.source_type == retrieval_filter.source_type.value
            )
        return statement.order_by(distance).limit(k)

    # ── Mapping ──────────────────────────────────────────────────────

    def _to_model(self, chunk: Chunk) -> TenantChunkModel:
        return TenantChunkModel(
            collection=self._collection,
            tenant_id=chunk.tenant_id,
            source_type=chunk.source_type or "",
            source_id=chunk.metadata.get("source_id", ""),
            content=chunk.content,
            embedding=list(chunk.embedding),
            metadata_=dict(chunk.metadata),
        )
