from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.document import Document


class DocumentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> Document:
        """Required: document_name, document_type, content_json. Optional: template_id, variables, pdf_path."""
        document = Document(**kwargs)
        self.session.add(document)
        await self.session.flush()
        await self.session.refresh(document)
        return document

    async def get_by_id(self, document_id: uuid.UUID) -> Document | None:
        result = await self.session.execute(select(Document).where(Document.id == document_id))
        return result.scalar_one_or_none()

    async def list(
        self, document_type: str | None = None, template_id: uuid.UUID | None = None
    ) -> list[Document]:
        query = select(Document)
        if document_type:
            query = query.where(Document.document_type == document_type)
        if template_id:
            query = query.where(Document.template_id == template_id)
        result = await self.session.execute(query.order_by(Document.created_at.desc()))
        return list(result.scalars().all())

    async def update(self, document_id: uuid.UUID, **fields) -> Document | None:
        document = await self.get_by_id(document_id)
        if document is None:
            return None
        for name, value in fields.items():
            setattr(document, name, value)
        await self.session.flush()
        await self.session.refresh(document)
        return document

    async def commit(self) -> None:
        """Commit the request transaction early so a later failure cannot roll these rows back."""
        await self.session.commit()

    async def delete(self, document_id: uuid.UUID) -> bool:
        document = await self.get_by_id(document_id)
        if document is None:
            return False
        await self.session.delete(document)
        await self.session.flush()
        return True
