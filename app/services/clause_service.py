import json
import logging
import uuid

from pydantic import ValidationError

from app.exceptions import ClauseGenerationError, ClauseNotFoundError
from app.repositories.clause_repo import ClauseRepository
from app.schemas.clause import (
    ClauseCreate,
    ClauseGenerationResult,
    ClauseResponse,
    ClauseUpdate,
    GeneratedClause,
    SingleClauseResult,
)
from app.services.clause_naming import resolve_unique_clause_type
from app.services.llm.base import LLMProvider
from app.services.llm.prompts.clause_generation import (
    CLAUSE_GENERATION_SYSTEM,
    CLAUSE_GENERATION_USER,
    CLAUSE_SUGGESTIONS,
    DEFAULT_SUGGESTIONS,
    SINGLE_CLAUSE_SYSTEM,
    SINGLE_CLAUSE_USER,
)
from app.services.usage import record_llm_usage

logger = logging.getLogger(__name__)


def _context_block(context: dict) -> str:
    if not context:
        return ""
    return "\n\nContext information:\n" + json.dumps(context, indent=2, ensure_ascii=False, default=str)


class ClauseService:
    def __init__(
        self,
        llm: LLMProvider | None,
        repo: ClauseRepository | None = None,
        usage_repo=None,
        temperature: float = 0.7,
        max_output_tokens: int = 4000,
    ):
        self.llm = llm
        self.repo = repo
        self.usage_repo = usage_repo
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

    def _require_repo(self) -> ClauseRepository:
        if self.repo is None:
            raise RuntimeError("ClauseRepository must be injected to read or write clauses")
        return self.repo

    # --- library ---

    async def list_clauses(
        self,
        category: str | None = None,
        clause_type: str | None = None,
        is_sample: bool | None = None,
    ) -> list[ClauseResponse]:
        clauses = await self._require_repo().list(category=category, clause_type=clause_type, is_sample=is_sample)
        return [ClauseResponse.model_validate(c) for c in clauses]

    async def get_clause(self, clause_id: uuid.UUID) -> ClauseResponse:
        clause = await self._require_repo().get_by_id(clause_id)
        if clause is None:
            raise ClauseNotFoundError(clause_id)
        return ClauseResponse.model_validate(clause)

    async def create_clause(self, data: ClauseCreate, is_sample: bool = False) -> ClauseResponse:
        """Persist one clause under a clause_type that is free in its category."""
        repo = self._require_repo()
        clause_type = await resolve_unique_clause_type(data.clause_type, data.category, repo.find_types_by_prefix)
        clause = await repo.create(
            clause_type=clause_type,
            content=data.content,
            category=data.category,
            is_ai_generated=data.is_ai_generated,
            is_sample=is_sample,
        )
        logger.info(f"Clause created: id={clause.id} clause_type={clause.clause_type!r} category={clause.category!r}")
        return ClauseResponse.model_validate(clause)

    async def create_many(self, items: list[ClauseCreate]) -> list[ClauseResponse]:
        # One at a time: each name resolution must see the clauses inserted before it
        created = []
        for item in items:
            created.append(await self.create_clause(item))
        return created

    async def update_clause(self, clause_id: uuid.UUID, data: ClauseUpdate) -> ClauseResponse:
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        clause = await self._require_repo().update(clause_id, **fields)
        if clause is None:
            raise ClauseNotFoundError(clause_id)
        return ClauseResponse.model_validate(clause)

    async def delete_clause(self, clause_id: uuid.UUID) -> None:
        if not await self._require_repo().delete(clause_id):
            raise ClauseNotFoundError(clause_id)
        logger.info(f"Clause deleted: id={clause_id}")

    # --- samples ---

    async def set_sample(self, clause_id: uuid.UUID, is_sample: bool = True) -> ClauseResponse:
        clause = await self._require_repo().update(clause_id, is_sample=is_sample)
        if clause is None:
            raise ClauseNotFoundError(clause_id)
        return ClauseResponse.model_validate(clause)

    async def clone_sample(
        self, sample_id: uuid.UUID, category: str | None = None, clause_type: str | None = None
    ) -> ClauseResponse:
        """Copy a clause into a category as a regular (non-sample) clause."""
        sample = await self._require_repo().get_by_id(sample_id)
        if sample is None:
            raise ClauseNotFoundError(sample_id)
        return await self.create_clause(
            ClauseCreate(
                clause_type=clause_type or sample.clause_type,
                content=sample.content,
                category=category or sample.category,
                is_ai_generated=sample.is_ai_generated,
            )
        )

    # --- AI drafting ---

    async def generate_clauses(
        self, document_type: str, context: dict | None = None, category: str | None = None
    ) -> list[GeneratedClause]:
        """Draft a full clause set for a document type. Nothing is persisted.

        Raises:
            LLMProviderError: the LLM could not be reached.
            ClauseGenerationError: the LLM answered with something that is not a clause list.
        """
        context = context or {}
        messages = [
            {"role": "system", "content": CLAUSE_GENERATION_SYSTEM},
            {
                "role": "user",
                "content": CLAUSE_GENERATION_USER.format(
                    document_type=document_type,
                    context_block=_context_block(context),
                    suggestions=CLAUSE_SUGGESTIONS.get(document_type, DEFAULT_SUGGESTIONS),
                ),
            },
        ]

        logger.info(f"Generating clauses: document_type={document_type!r} context_keys={len(context)}")

        response = await self.llm.complete(
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_output_tokens,
            response_format={"type": "json_object"},
        )
        await record_llm_usage(
            self.usage_repo,
            provider=getattr(self.llm, "provider_name", "unknown"),
            operation="clause_generation",
            response=response,
        )

        try:
            result = ClauseGenerationResult.model_validate(json.loads(response.content))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Unusable clause generation output: document_type={document_type!r} error={e}")
            raise ClauseGenerationError(f"AI returned invalid clauses for {document_type!r}: {e}")

        logger.info(
            f"Generated {len(result.clauses)} clauses for {document_type!r} "
            f"({response.input_tokens} in / {response.output_tokens} out tokens, model={response.model})"
        )

        target_category = category or document_type
        return [clause.model_copy(update={"category": target_category}) for clause in result.clauses]

    async def generate_single(
        self, clause_type: str, category: str, context: dict | None = None
    ) -> ClauseResponse:
        """Draft one clause with the LLM and persist it."""
        messages = [
            {"role": "system", "content": SINGLE_CLAUSE_SYSTEM},
            {
                "role": "user",
                "content": SINGLE_CLAUSE_USER.format(
                    clause_type=clause_type,
                    category=category,
                    context_block=_context_block(context or {}),
                ),
            },
        ]
        response = await self.llm.complete(
            messages=messages,
            temperature=self.temperature,
            max_tokens=self.max_output_tokens,
            response_format={"type": "json_object"},
        )
        await record_llm_usage(
            self.usage_repo,
            provider=getattr(self.llm, "provider_name", "unknown"),
            operation="single_clause_generation",
            response=response,
        )

        try:
            draft = SingleClauseResult.model_validate(json.loads(response.content)).clause
        except (json.JSONDecodeError, ValidationError) as e:
            raise ClauseGenerationError(f"AI returned an invalid clause for {clause_type!r}: {e}")

        return await self.create_clause(
            ClauseCreate(
                clause_type=draft.clause_type or clause_type,
                content=draft.content,
                category=category,
                is_ai_generated=True,
            )
        )
