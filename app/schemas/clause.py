import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class GeneratedClause(BaseModel):
    """One clause drafted by the LLM. Content is HTML and may hold [Placeholders]."""
    clause_type: str = Field(..., min_length=1, max_length=150)
    content: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)


class ClauseGenerationResult(BaseModel):
    clauses: list[GeneratedClause] = Field(..., min_length=1)


class SingleClauseDraft(BaseModel):
    clause_type: str | None = None
    content: str = Field(..., min_length=1)


class SingleClauseResult(BaseModel):
    clause: SingleClauseDraft


class ClauseCreate(BaseModel):
    clause_type: str = Field(..., min_length=1, max_length=150)
    content: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=100)
    is_ai_generated: bool = False


class ClauseUpdate(BaseModel):
    clause_type: str | None = Field(None, min_length=1, max_length=150)
    content: str | None = Field(None, min_length=1)
    category: str | None = Field(None, min_length=1, max_length=100)


class ClauseGenerateRequest(BaseModel):
    document_type: str = Field(..., min_length=1)
    category: str | None = Field(None, min_length=1, max_length=100)
    context: dict[str, Any] = Field(default_factory=dict)


class ClauseGenerateSingleRequest(BaseModel):
    clause_type: str = Field(..., min_length=1, max_length=150)
    category: str = Field(..., min_length=1, max_length=100)
    context: dict[str, Any] = Field(default_factory=dict)


class SaveGeneratedRequest(BaseModel):
    clauses: list[ClauseCreate] = Field(..., min_length=1)


class CloneClauseRequest(BaseModel):
    """Copy a sample clause. category and clause_type default to the sample's."""
    category: str | None = Field(None, min_length=1, max_length=100)
    clause_type: str | None = Field(None, min_length=1, max_length=150)


class SampleFlagRequest(BaseModel):
    is_sample: bool = True


class ClauseResponse(BaseModel):
    id: uuid.UUID
    clause_type: str
    content: str
    category: str
    is_ai_generated: bool
    is_sample: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
