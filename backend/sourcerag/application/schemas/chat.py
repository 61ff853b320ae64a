"""Pydantic v2 schemas (DTOs) for question answering."""

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """A natural-language question about the tenant's own content."""

    question: str = Field(..., min_length=1, description="The question to answer")


class ChatResponse(BaseModel):
    answer: str
    sources: list[str] = Field(default_factory=list)
