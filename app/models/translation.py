from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDPrimaryKey


class TranslationPreview(Base):
    """An unconfirmed machine translation, usable for confirmation until expires_at.

    Rows are kept after expiry for audit; they are simply never confirmable again.
    """

    __tablename__ = "translation_previews"

    preview_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    original_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    original_type: Mapped[str] = mapped_column(String(50), nullable=False, default="document")
    lang: Mapped[str] = mapped_column(String(10), nullable=False)
    translated_content: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class Translation(Base, UUIDPrimaryKey, TimestampMixin):
    """The authoritative translation for one (original, type, language)."""

    __tablename__ = "translations"
    __table_args__ = (
        UniqueConstraint("original_id", "original_type", "lang", name="uq_translation_original_lang"),
    )

    original_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    original_type: Mapped[str] = mapped_column(String(50), nullable=False)
    lang: Mapped[str] = mapped_column(String(10), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="confirmed")
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    verified_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
