import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class DocumentClause(BaseModel):
    clause_type: str = ""
    content: str
    category: str = ""


class DocumentContent(BaseModel):
    clauses: list[DocumentClause] = Field(default_factory=list)


class DocumentGenerateRequest(BaseModel):
    """One request shape for the three creation paths.

    - content_json given: saved as is (document_name and document_type required)
    - template_id given: the template's clauses are filled from context
    - neither: clauses are drafted by the LLM for document_type, then filled
    """
    template_id: uuid.UUID | None = None
    document_name: str | None = Field(None, min_length=1, max_length=255)
    document_type: str | None = Field(None, min_length=1, max_length=100)
    content_json: DocumentContent | None = None
    context: dict[str, Any] = Field(default_factory=dict)


class DocumentUpdate(BaseModel):
    document_name: str | None = Field(None, min_length=1, max_length=255)
    document_type: str | None = Field(None, min_length=1, max_length=100)
    content_json: DocumentContent | None = None
    variables: dict[str, Any] | None = None


class DocumentResponse(BaseModel):
    id: uuid.UUID
    template_id: uuid.UUID | None = None
    document_name: str
    document_type: str
    content_json: dict[str, Any]
    variables: dict[str, Any] | None = None
    pdf_path: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class DocumentContentResponse(BaseModel):
    text: str
    lang: str
    source: Literal["original", "translation"]
    translation_available: bool
    translation_id: uuid.UUID | None = None


class PdfSaveResponse(BaseModel):
    document_id: uuid.UUID
    pdf_path: str
    size_bytes: int
