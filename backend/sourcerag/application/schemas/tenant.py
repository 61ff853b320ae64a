"""Pydantic v2 schemas (DTOs) for tenant data management."""

from pydantic import BaseModel


class DeleteDataResponse(BaseModel):
    success: bool
    deleted_count: int
    message: str
