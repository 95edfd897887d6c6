import uuid
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.translation import Translation, TranslationPreview


class TranslationPreviewRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> TranslationPreview:
        preview = TranslationPreview(**kwargs)
        self.session.add(preview)
        await self.session.flush()
        return preview

    async def get_valid_by_id(self, preview_id: uuid.UUID, now: datetime) -> TranslationPreview | None:
        """Return the preview only while now < expires_at. Missing and expired look the same."""
        result = await self.session.execute(
            select(TranslationPreview)
            .where(TranslationPreview.preview_id == preview_id)
            .where(TranslationPreview.expires_at > now)
        )
        return result.scalar_one_or_none()

    async def mark_confirmed(self, preview_id: uuid.UUID) -> None:
        await self.session.execute(
            update(TranslationPreview)
            .where(TranslationPreview.preview_id == preview_id)
            .values(confirmed=True)
        )
        await self.session.flush()


class TranslationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def upsert(
        self,
        *,
        original_id: uuid.UUID | None,
        original_type: str,
        lang: str,
        content: str,
        created_by: str | None,
        verified_by: str | None,
    ) -> None:
        """Insert or overwrite the translation for (original_id, original_type, lang).

        An existing row keeps its created_by; content, status and verified_by
        are replaced and updated_at moves forward.
        """
        translation = await self.get_by_triple(original_id, original_type, lang)
        if translation is None:
            self.session.add(
                Translation(
                    original_id=original_id,
                    original_type=original_type,
                    lang=lang,
                    content=content,
                    status="confirmed",
                    created_by=created_by,
                    verified_by=verified_by,
                )
            )
        else:
            translation.content = content
            translation.status = "confirmed"
            translation.verified_by = verified_by
        await self.session.flush()

    async def get_by_id(self, translation_id: uuid.UUID) -> Translation | None:
        result = await self.session.execute(
            select(Translation).where(Translation.id == translation_id)
        )
        return result.scalar_one_or_none()

    async def get_by_triple(
        self, original_id: uuid.UUID | None, original_type: str, lang: str
    ) -> Translation | None:
        # original_id None compiles to IS NULL, so free-text translations upsert too
        result = await self.session.execute(
            select(Translation)
            .where(Translation.original_id == original_id)
            .where(Translation.original_type == original_type)
            .where(Translation.lang == lang)
        )
        return result.scalar_one_or_none()

    async def get_latest_confirmed(
        self, original_id: uuid.UUID, original_type: str, lang: str | None = None
    ) -> Translation | None:
        """Most recently updated confirmed translation; any language when lang is None."""
        query = (
            select(Translation)
            .where(Translation.original_id == original_id)
            .where(Translation.original_type == original_type)
            .where(Translation.status == "confirmed")
        )
        if lang:
            query = query.where(Translation.lang == lang)
        result = await self.session.execute(
            query.order_by(Translation.updated_at.desc()).limit(1)
        )
        return result.scalar_one_or_none()
