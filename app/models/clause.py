from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDPrimaryKey


class Clause(Base, UUIDPrimaryKey, TimestampMixin):
    """A reusable block of document text, usually HTML with [Placeholder] tokens.

    clause_type is unique within a category by convention only: the name
    resolver picks a free name at creation time, there is no DB constraint.
    """

    __tablename__ = "clauses"
    __table_args__ = (Index("ix_clauses_category_clause_type", "category", "clause_type"),)

    clause_type: Mapped[str] = mapped_column(String(150), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    is_ai_generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_sample: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
