import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class TranslationPreviewRequest(BaseModel):
    """text is optional for documents: it is then assembled from the document's clauses.

    original_id may be omitted to translate free text that belongs to no stored record.
    """
    original_id: uuid.UUID | None = None
    original_type: str = Field("document", min_length=1, max_length=50)
    lang: str = Field(..., min_length=2, max_length=10)
    text: str | None = None
    created_by: str | None = None


class DocumentTranslatePreviewRequest(BaseModel):
    lang: str = Field(..., min_length=2, max_length=10)
    created_by: str | None = None


class TranslationPreviewResponse(BaseModel):
    preview_id: uuid.UUID
    translated: str
    expires_at: datetime


class TranslationConfirmRequest(BaseModel):
    preview_id: uuid.UUID
    user_id: str | None = None


class TranslationConfirmResponse(BaseModel):
    translation_id: uuid.UUID | None
