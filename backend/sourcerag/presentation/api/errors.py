"""Translation of engine errors into HTTP responses."""

from fastapi import HTTPException, status

from sourcerag.domain.exceptions import (
    EmbeddingServiceError,
    GenerationServiceError,
    IndexUnavailableError,
    IngestionError,
    SourceRagError,
    RetrievalTimeoutError,
)

_STATUS_BY_ERROR: tuple[tuple[type[SourceRagError], int], ...] = (
    (IngestionError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (RetrievalTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT),
    (EmbeddingServiceError, status.HTTP_502_BAD_GATEWAY),
    (GenerationServiceError, status.HTTP_502_BAD_GATEWAY),
    (IndexUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_code_for(error: SourceRagError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: SourceRagError) -> HTTPException:
    """``{"detail": {"error": kind, "message": message}}`` with the mapped status."""
    return HTTPException(
        status_code=status_code_for(error),
        detail={"error": error.kind, "message": error.message},
    )
