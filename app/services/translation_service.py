import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from app.exceptions import DocumentNotFoundError, InvalidInputError, LLMProviderError, PreviewNotFoundError
from app.repositories.document_repo import DocumentRepository
from app.repositories.translation_repo import TranslationPreviewRepository, TranslationRepository
from app.schemas.document import DocumentContentResponse
from app.schemas.translation import TranslationConfirmResponse, TranslationPreviewResponse
from app.services.llm.base import LLMProvider
from app.services.llm.prompts.translation import (
    HTML_TRANSLATION_SYSTEM,
    HTML_TRANSLATION_USER,
    TEXT_TRANSLATION_SYSTEM,
    TEXT_TRANSLATION_USER,
    language_name,
)
from app.services.pdf_service import is_html
from app.services.placeholders import PLACEHOLDER_PATTERN
from app.services.usage import record_llm_usage

logger = logging.getLogger(__name__)

SOURCE_LANG = "en"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def assemble_document_text(document) -> str:
    """English text of a document: clause contents joined by a blank line, else its name."""
    content_json = document.content_json
    if isinstance(content_json, dict) and isinstance(content_json.get("clauses"), list) and content_json["clauses"]:
        return "\n\n".join(str(clause.get("content") or "") for clause in content_json["clauses"])
    if isinstance(content_json, str) and content_json:
        return content_json
    return document.document_name or ""


def count_placeholders(text: str) -> int:
    return len(PLACEHOLDER_PATTERN.findall(text or ""))


class TranslationService:
    """Preview -> confirm lifecycle for machine translations.

    A preview is a throwaway translation that can be confirmed until it
    expires. Confirming copies it into the single authoritative translation
    for (original_id, original_type, lang), replacing whatever was there.
    """

    def __init__(
        self,
        llm: LLMProvider | None,
        preview_repo: TranslationPreviewRepository,
        translation_repo: TranslationRepository,
        document_repo: DocumentRepository | None = None,
        usage_repo=None,
        preview_ttl: timedelta = timedelta(minutes=30),
        temperature: float = 0.2,
        max_output_tokens: int = 4000,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.llm = llm
        self.preview_repo = preview_repo
        self.translation_repo = translation_repo
        self.document_repo = document_repo
        self.usage_repo = usage_repo
        self.preview_ttl = preview_ttl
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.clock = clock

    async def create_preview(
        self,
        *,
        lang: str,
        original_id: uuid.UUID | None = None,
        original_type: str = "document",
        text: str | None = None,
        created_by: str | None = None,
    ) -> TranslationPreviewResponse:
        if not lang or not lang.strip():
            raise InvalidInputError("lang is required")

        if not text and original_type == "document" and original_id is not None:
            text = await self._document_text(original_id)
        if not text or not text.strip():
            raise InvalidInputError("No text to translate")

        translated, response = await self._translate(text, lang)

        expires_at = self.clock() + self.preview_ttl
        preview = await self.preview_repo.create(
            preview_id=uuid.uuid4(),
            original_id=original_id,
            original_type=original_type,
            lang=lang,
            translated_content=translated,
            created_by=created_by,
            expires_at=expires_at,
            confirmed=False,
        )
        logger.info(
            f"Translation preview created: preview_id={preview.preview_id} original_id={original_id} "
            f"lang={lang} expires_at={expires_at.isoformat()}"
        )

        await record_llm_usage(
            self.usage_repo,
            provider=getattr(self.llm, "provider_name", "unknown"),
            operation="translation_preview",
            response=response,
            document_id=original_id if original_type == "document" else None,
        )

        return TranslationPreviewResponse(
            preview_id=preview.preview_id, translated=translated, expires_at=expires_at
        )

    async def confirm_preview(
        self, preview_id: uuid.UUID, user_id: str | None = None
    ) -> TranslationConfirmResponse:
        """Make a still-valid preview the authoritative translation.

        Raises PreviewNotFoundError for unknown and expired previews alike.
        """
        preview = await self.preview_repo.get_valid_by_id(preview_id, self.clock())
        if preview is None:
            raise PreviewNotFoundError(preview_id)

        await self.translation_repo.upsert(
            original_id=preview.original_id,
            original_type=preview.original_type,
            lang=preview.lang,
            content=preview.translated_content,
            created_by=preview.created_by,
            verified_by=user_id or preview.created_by,
        )
        await self.preview_repo.mark_confirmed(preview_id)

        translation = await self.translation_repo.get_by_triple(
            preview.original_id, preview.original_type, preview.lang
        )
        translation_id = translation.id if translation else None
        logger.info(
            f"Translation confirmed: preview_id={preview_id} translation_id={translation_id} lang={preview.lang}"
        )
        return TranslationConfirmResponse(translation_id=translation_id)

    async def get_document_content(self, document_id: uuid.UUID, lang: str = SOURCE_LANG) -> DocumentContentResponse:
        """English text, or the latest confirmed translation. A missing translation is not an error."""
        document = await self._get_document(document_id)
        english = assemble_document_text(document)
        lang = (lang or SOURCE_LANG).strip()

        if lang == SOURCE_LANG:
            return DocumentContentResponse(text=english, lang=lang, source="original", translation_available=False)

        translation = await self.translation_repo.get_latest_confirmed(document_id, "document", lang)
        if translation is None:
            return DocumentContentResponse(
                text=english, lang=lang, source="original", translation_available=False
            )
        return DocumentContentResponse(
            text=translation.content,
            lang=lang,
            source="translation",
            translation_available=True,
            translation_id=translation.id,
        )

    async def _translate(self, text: str, lang: str):
        html_input = is_html(text)
        system, user = (
            (HTML_TRANSLATION_SYSTEM, HTML_TRANSLATION_USER)
            if html_input
            else (TEXT_TRANSLATION_SYSTEM, TEXT_TRANSLATION_USER)
        )
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": user.format(language=language_name(lang), text=text)},
        ]

        logger.info(f"Translating: lang={lang} chars={len(text)} html={html_input}")
        response = await self.llm.complete(
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_output_tokens,
        )

        translated = (response.content or "").strip()
        if not translated:
            raise LLMProviderError(f"Empty translation output for lang={lang}")

        # Drift is logged, never fatal
        if html_input and not is_html(translated):
            logger.warning(f"Translation lost its HTML markup: lang={lang} model={response.model}")
        source_count, translated_count = count_placeholders(text), count_placeholders(translated)
        if source_count != translated_count:
            logger.warning(
                f"Placeholder count changed in translation: lang={lang} "
                f"source={source_count} translated={translated_count}"
            )

        return translated, response

    async def _get_document(self, document_id: uuid.UUID):
        if self.document_repo is None:
            raise RuntimeError("DocumentRepository must be injected to read documents")
        document = await self.document_repo.get_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def _document_text(self, document_id: uuid.UUID) -> str:
        return assemble_document_text(await self._get_document(document_id))
