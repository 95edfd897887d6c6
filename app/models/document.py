from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, JSONType, TimestampMixin, UUIDPrimaryKey


class Document(Base, UUIDPrimaryKey, TimestampMixin):
    """A generated document.

    content_json is a frozen snapshot ({"clauses": [{clause_type, content, category}]});
    editing the source template later never changes it.
    """

    __tablename__ = "documents"

    template_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("templates.id", ondelete="SET NULL"), nullable=True
    )
    document_name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_type: Mapped[str] = mapped_column(String(100), nullable=False)
    content_json: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    variables: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    pdf_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
