from __future__ import annotations

import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, UUIDPrimaryKey


class Template(Base, UUIDPrimaryKey, TimestampMixin):
    __tablename__ = "templates"

    template_name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Deleting a template removes its position rows, never the clauses themselves
    clause_links: Mapped[list[TemplateClause]] = relationship(
        "TemplateClause",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by="TemplateClause.position",
        lazy="selectin",
    )

    @property
    def clauses(self) -> list[Clause]:
        return [link.clause for link in self.clause_links]

    @property
    def placeholders(self) -> list[str]:
        from app.services.placeholders import extract_placeholders_ordered

        return extract_placeholders_ordered(self.clauses)


class TemplateClause(Base):
    """Places a clause in a template at a 1-based position."""

    __tablename__ = "template_clauses"
    __table_args__ = (
        UniqueConstraint("template_id", "clause_id", name="uq_template_clause"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    template_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("templates.id", ondelete="CASCADE"), nullable=False
    )
    clause_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("clauses.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    template: Mapped[Template] = relationship("Template", back_populates="clause_links")
    clause: Mapped[Clause] = relationship("Clause", lazy="selectin")
