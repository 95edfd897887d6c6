"""
Tests for the clause library and AI clause drafting.
"""

import json
import uuid
from unittest.mock import AsyncMock

import pytest

from app.exceptions import ClauseGenerationError, ClauseNotFoundError, LLMProviderError
from app.repositories.clause_repo import ClauseRepository
from app.schemas.clause import ClauseCreate, ClauseUpdate
from app.services.clause_service import ClauseService
from conftest import FakeLLM

GENERATED = json.dumps(
    {
        "clauses": [
            {"clause_type": "header", "content": "<h1>[Company Name]</h1>", "category": "whatever"},
            {"clause_type": "greeting", "content": "<p>Dear [Candidate Name],</p>", "category": "whatever"},
        ]
    }
)


class TestClauseLibrary:
    @pytest.mark.asyncio
    async def test_colliding_names_get_suffixes(self, session):
        service = ClauseService(llm=None, repo=ClauseRepository(session))

        first = await service.create_clause(ClauseCreate(clause_type="header", content="A", category="nda"))
        second = await service.create_clause(ClauseCreate(clause_type="header", content="B", category="nda"))
        third = await service.create_clause(ClauseCreate(clause_type="header", content="C", category="nda"))
        other = await service.create_clause(ClauseCreate(clause_type="header", content="D", category="offer"))

        assert [first.clause_type, second.clause_type, third.clause_type] == ["header", "header-1", "header-2"]
        assert other.clause_type == "header"

    @pytest.mark.asyncio
    async def test_batch_creation_resolves_in_order(self, session):
        service = ClauseService(llm=None, repo=ClauseRepository(session))
        items = [ClauseCreate(clause_type="terms", content=str(i), category="nda") for i in range(3)]

        created = await service.create_many(items)

        assert [c.clause_type for c in created] == ["terms", "terms-1", "terms-2"]
        assert [c.content for c in created] == ["0", "1", "2"]

    @pytest.mark.asyncio
    async def test_prefix_lookup_escapes_like_wildcards(self, session):
        repo = ClauseRepository(session)
        await repo.create(clause_type="axb", content="x", category="nda")
        await repo.create(clause_type="a_b-1", content="x", category="nda")

        assert await repo.find_types_by_prefix("a_b", "nda") == ["a_b-1"]

    @pytest.mark.asyncio
    async def test_list_filters_by_category_and_sample_flag(self, session):
        repo = ClauseRepository(session)
        await repo.create(clause_type="intro", content="x", category="nda", is_sample=True)
        await repo.create(clause_type="terms", content="x", category="nda", is_sample=False)
        await repo.create(clause_type="intro", content="x", category="offer_letter", is_sample=True)

        assert [c.clause_type for c in await repo.list(category="nda", is_sample=False)] == ["terms"]
        assert len(await repo.list(clause_type="intro")) == 2

    @pytest.mark.asyncio
    async def test_update_and_delete(self, session):
        service = ClauseService(llm=None, repo=ClauseRepository(session))
        clause = await service.create_clause(ClauseCreate(clause_type="intro", content="old", category="nda"))

        updated = await service.update_clause(clause.id, ClauseUpdate(content="new"))
        assert updated.content == "new"
        assert updated.clause_type == "intro"

        await service.delete_clause(clause.id)
        with pytest.raises(ClauseNotFoundError):
            await service.get_clause(clause.id)
        with pytest.raises(ClauseNotFoundError):
            await service.delete_clause(clause.id)

    @pytest.mark.asyncio
    async def test_clone_sample_into_category(self, session):
        service = ClauseService(llm=None, repo=ClauseRepository(session))
        sample = await service.create_clause(
            ClauseCreate(clause_type="greeting", content="Dear [Name],", category="samples"), is_sample=True
        )
        await service.create_clause(ClauseCreate(clause_type="greeting", content="Hi", category="offer"))

        clone = await service.clone_sample(sample.id, category="offer")

        assert clone.id != sample.id
        assert clone.clause_type == "greeting-1"
        assert clone.category == "offer"
        assert clone.content == "Dear [Name],"
        assert clone.is_sample is False

        samples = await service.list_clauses(is_sample=True)
        assert [s.id for s in samples] == [sample.id]

    @pytest.mark.asyncio
    async def test_clone_unknown_clause(self, session):
        service = ClauseService(llm=None, repo=ClauseRepository(session))
        with pytest.raises(ClauseNotFoundError):
            await service.clone_sample(uuid.uuid4())


class TestClauseGeneration:
    @pytest.mark.asyncio
    async def test_category_defaults_to_document_type(self):
        llm = FakeLLM(GENERATED)
        usage_repo = AsyncMock()
        service = ClauseService(llm=llm, usage_repo=usage_repo)

        drafts = await service.generate_clauses("offer_letter", {"Candidate Name": "Alice"})

        assert [d.clause_type for d in drafts] == ["header", "greeting"]
        assert {d.category for d in drafts} == {"offer_letter"}
        assert llm.calls[0]["response_format"] == {"type": "json_object"}
        assert "Candidate Name" in llm.calls[0]["messages"][1]["content"]
        assert usage_repo.create.await_args.kwargs["operation"] == "clause_generation"

    @pytest.mark.asyncio
    async def test_explicit_category(self):
        service = ClauseService(llm=FakeLLM(GENERATED))
        drafts = await service.generate_clauses("offer_letter", category="hr")
        assert {d.category for d in drafts} == {"hr"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["not json", '{"clauses": []}', '{"items": []}'])
    async def test_unusable_output(self, answer):
        service = ClauseService(llm=FakeLLM(answer))
        with pytest.raises(ClauseGenerationError):
            await service.generate_clauses("nda")

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self):
        service = ClauseService(llm=FakeLLM(LLMProviderError("All models failed")))
        with pytest.raises(LLMProviderError):
            await service.generate_clauses("nda")

    @pytest.mark.asyncio
    async def test_generate_single_persists_ai_clause(self, session):
        llm = FakeLLM(json.dumps({"clause": {"clause_type": "non_compete", "content": "<p>No competing.</p>"}}))
        service = ClauseService(llm=llm, repo=ClauseRepository(session))

        clause = await service.generate_single("non_compete", "employment_contract")

        assert clause.is_ai_generated is True
        assert clause.category == "employment_contract"
        assert clause.content == "<p>No competing.</p>"
