"""Tenant data endpoints — remove everything a tenant has ingested."""

from fastapi import APIRouter, Depends

from sourcerag.application.schemas import DeleteDataResponse
from sourcerag.application.services import TenantDeletionService
from sourcerag.domain.exceptions import SourceRagError
from sourcerag.infrastructure.dependencies import get_tenant_deletion_service, get_tenant_id
from sourcerag.presentation.api.errors import to_http_exception

router = APIRouter(prefix="/tenant", tags=["Tenant"])


@router.post("/delete-data", response_model=DeleteDataResponse)
async def delete_tenant_data(
    tenant_id: str = Depends(get_tenant_id),
    service: TenantDeletionService = Depends(get_tenant_deletion_service),
) -> DeleteDataResponse:
    """Delete all indexed content of the calling tenant. Safe to repeat."""
    try:
        result = await service.purge(tenant_id)
    except SourceRagError as e:
        raise to_http_exception(e)
    return DeleteDataResponse(
        success=result.success,
        deleted_count=result.deleted_count,
        message="All your data has been deleted successfully",
    )
