import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.clause import ClauseResponse


class TemplateCreate(BaseModel):
    template_name: str = Field(..., min_length=1, max_length=200)
    document_type: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    clause_ids: list[uuid.UUID] = Field(default_factory=list)


class TemplateSave(TemplateCreate):
    """Saving from the builder requires at least one clause."""
    clause_ids: list[uuid.UUID] = Field(..., min_length=1)


class TemplateUpdate(BaseModel):
    template_name: str | None = Field(None, min_length=1, max_length=200)
    document_type: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None


class TemplateGenerateRequest(BaseModel):
    template_name: str = Field(..., min_length=1, max_length=200)
    document_type: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)


class AddClauseRequest(BaseModel):
    clause_id: uuid.UUID
    position: int | None = Field(None, ge=1)


class TemplateResponse(BaseModel):
    """Template with its clauses in position order."""
    id: uuid.UUID
    template_name: str
    document_type: str
    description: str | None = None
    is_ai_generated: bool
    clauses: list[ClauseResponse] = Field(default_factory=list)
    placeholders: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
