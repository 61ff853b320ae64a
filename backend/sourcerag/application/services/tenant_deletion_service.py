"""Tenant deletion service — removes every index entry owned by a tenant."""

import logging

from sourcerag.application.interfaces.tenant_index import TenantIndex
from sourcerag.domain.entities import PurgeResult
from sourcerag.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("TenantDeletionService")


class TenantDeletionService:
    """Bulk, idempotent removal of a tenant's content.

    Deleting a tenant with no content succeeds with ``deleted_count == 0``.
    Index errors are logged and propagated.
    """

    def __init__(self, tenant_index: TenantIndex):
        self._index = tenant_index

    async def purge(self, tenant_id: str) -> PurgeResult:
        if not tenant_id:
            raise ValueError("tenant_id is required")

        plog.step_start(PipelineStage.DELETE, "Deleting all data", tenant_id=tenant_id)
        try:
            deleted = await self._index.delete_by_tenant(tenant_id)
        except Exception as e:
            plog.step_error(PipelineStage.DELETE, f"Error deleting data for tenant {tenant_id}", error=e)
            raise

        plog.step_complete(PipelineStage.DELETE, f"Deleted {deleted} chunks", tenant_id=tenant_id)
        return PurgeResult(tenant_id=tenant_id, deleted_count=deleted)
