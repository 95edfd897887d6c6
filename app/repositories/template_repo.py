from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ClauseNotFoundError, InvalidInputError
from app.models.clause import Clause
from app.models.template import Template, TemplateClause


class TemplateRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, template_id: uuid.UUID) -> Template | None:
        """Load a template with its clauses in position order."""
        result = await self.session.execute(select(Template).where(Template.id == template_id))
        return result.scalar_one_or_none()

    async def list(self, document_type: str | None = None) -> list[Template]:
        query = select(Template)
        if document_type:
            query = query.where(Template.document_type == document_type)
        result = await self.session.execute(query.order_by(Template.created_at.desc()))
        return list(result.scalars().all())

    async def create_with_clauses(self, fields: dict, clause_ids: list[uuid.UUID]) -> Template:
        """Insert the template and its position rows in a single flush.

        Either everything lands or nothing does: a failure here fails the
        request transaction, which the session dependency rolls back.
        """
        if len(set(clause_ids)) != len(clause_ids):
            raise InvalidInputError("clause_ids must not contain duplicates")

        clauses = await self._load_clauses(clause_ids)
        template = Template(**fields)
        template.clause_links = [
            TemplateClause(clause=clause, position=position)
            for position, clause in enumerate(clauses, start=1)
        ]
        self.session.add(template)
        await self.session.flush()
        await self.session.refresh(template)
        return template

    async def update(self, template_id: uuid.UUID, **fields) -> Template | None:
        template = await self.get_by_id(template_id)
        if template is None:
            return None
        for name, value in fields.items():
            setattr(template, name, value)
        await self.session.flush()
        await self.session.refresh(template)
        return template

    async def delete(self, template_id: uuid.UUID) -> bool:
        template = await self.get_by_id(template_id)
        if template is None:
            return False
        await self.session.delete(template)
        await self.session.flush()
        return True

    async def add_clause(
        self, template_id: uuid.UUID, clause_id: uuid.UUID, position: int | None = None
    ) -> Template | None:
        """Insert (or move) a clause at a 1-based position; append when position is None."""
        template = await self.get_by_id(template_id)
        if template is None:
            return None
        (clause,) = await self._load_clauses([clause_id])

        links = [link for link in template.clause_links if link.clause_id != clause_id]
        existing = next((link for link in template.clause_links if link.clause_id == clause_id), None)
        link = existing or TemplateClause(clause=clause, position=0)

        index = len(links) if position is None else min(max(position, 1), len(links) + 1) - 1
        links.insert(index, link)
        return await self._renumber(template, links)

    async def remove_clause(self, template_id: uuid.UUID, clause_id: uuid.UUID) -> Template | None:
        template = await self.get_by_id(template_id)
        if template is None:
            return None
        links = [link for link in template.clause_links if link.clause_id != clause_id]
        return await self._renumber(template, links)

    async def _renumber(self, template: Template, links: list[TemplateClause]) -> Template:
        # Positions stay 1..n with no gaps after every change
        for position, link in enumerate(links, start=1):
            link.position = position
        template.clause_links = links
        await self.session.flush()
        await self.session.refresh(template)
        return template

    async def _load_clauses(self, clause_ids: list[uuid.UUID]) -> list[Clause]:
        if not clause_ids:
            return []
        result = await self.session.execute(select(Clause).where(Clause.id.in_(clause_ids)))
        by_id = {clause.id: clause for clause in result.scalars().all()}
        missing = [cid for cid in clause_ids if cid not in by_id]
        if missing:
            raise ClauseNotFoundError(missing[0])
        return [by_id[cid] for cid in clause_ids]
