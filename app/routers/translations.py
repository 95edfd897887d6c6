import logging

from fastapi import APIRouter, Depends, status

from app.schemas.translation import (
    TranslationConfirmRequest,
    TranslationConfirmResponse,
    TranslationPreviewRequest,
    TranslationPreviewResponse,
)
from app.services.translation_service import TranslationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translations", tags=["Translations"])


def get_translation_service() -> TranslationService:
    # Placeholder: overridden in create_app() with a session-bound service
    raise NotImplementedError("Dependency override not configured")


@router.post("/preview", response_model=TranslationPreviewResponse, status_code=status.HTTP_201_CREATED)
async def create_translation_preview(
    body: TranslationPreviewRequest,
    service: TranslationService = Depends(get_translation_service),
):
    """Translate text (or a document's content) into a preview valid for a limited time."""
    logger.info(f"Translation preview request: original_id={body.original_id} lang={body.lang}")
    result = await service.create_preview(
        lang=body.lang,
        original_id=body.original_id,
        original_type=body.original_type,
        text=body.text,
        created_by=body.created_by,
    )
    logger.info(f"Translation preview response: preview_id={result.preview_id}")
    return result


@router.post("/confirm", response_model=TranslationConfirmResponse)
async def confirm_translation(
    body: TranslationConfirmRequest,
    service: TranslationService = Depends(get_translation_service),
):
    """Store a preview as the authoritative translation. Expired previews answer 404."""
    logger.info(f"Translation confirm request: preview_id={body.preview_id}")
    return await service.confirm_preview(body.preview_id, body.user_id)
