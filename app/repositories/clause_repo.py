from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.clause import Clause


class ClauseRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> Clause:
        clause = Clause(**kwargs)
        self.session.add(clause)
        await self.session.flush()
        await self.session.refresh(clause)
        return clause

    async def get_by_id(self, clause_id: uuid.UUID) -> Clause | None:
        result = await self.session.execute(select(Clause).where(Clause.id == clause_id))
        return result.scalar_one_or_none()

    async def list(
        self,
        category: str | None = None,
        clause_type: str | None = None,
        is_sample: bool | None = None,
    ) -> list[Clause]:
        query = select(Clause)
        if category:
            query = query.where(Clause.category == category)
        if clause_type:
            query = query.where(Clause.clause_type == clause_type)
        if is_sample is not None:
            query = query.where(Clause.is_sample == is_sample)
        result = await self.session.execute(query.order_by(Clause.created_at.desc()))
        return list(result.scalars().all())

    async def find_types_by_prefix(self, prefix: str, category: str) -> list[str]:
        """Return every clause_type in the category that starts with prefix.

        LIKE wildcards in the prefix are escaped, so "a_b" only matches literally.
        """
        result = await self.session.execute(
            select(Clause.clause_type)
            .where(Clause.category == category)
            .where(Clause.clause_type.startswith(prefix, autoescape=True))
        )
        return list(result.scalars().all())

    async def update(self, clause_id: uuid.UUID, **fields) -> Clause | None:
        clause = await self.get_by_id(clause_id)
        if clause is None:
            return None
        for name, value in fields.items():
            setattr(clause, name, value)
        await self.session.flush()
        await self.session.refresh(clause)
        return clause

    async def delete(self, clause_id: uuid.UUID) -> bool:
        clause = await self.get_by_id(clause_id)
        if clause is None:
            return False
        await self.session.delete(clause)
        await self.session.flush()
        return True
