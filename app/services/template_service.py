import logging
import uuid

from app.exceptions import InvalidInputError, TemplateNotFoundError
from app.repositories.template_repo import TemplateRepository
from app.schemas.clause import ClauseCreate
from app.schemas.template import TemplateCreate, TemplateGenerateRequest, TemplateResponse, TemplateUpdate
from app.services.clause_service import ClauseService

logger = logging.getLogger(__name__)


class TemplateService:
    def __init__(self, repo: TemplateRepository, clause_service: ClauseService | None = None):
        self.repo = repo
        self.clause_service = clause_service

    async def list_templates(self, document_type: str | None = None) -> list[TemplateResponse]:
        templates = await self.repo.list(document_type=document_type)
        return [TemplateResponse.model_validate(t) for t in templates]

    async def get_template(self, template_id: uuid.UUID) -> TemplateResponse:
        template = await self.repo.get_by_id(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return TemplateResponse.model_validate(template)

    async def create_template(self, data: TemplateCreate, is_ai_generated: bool = False) -> TemplateResponse:
        """Create the template and its ordered clause positions as one unit."""
        fields = data.model_dump(exclude={"clause_ids"})
        fields["is_ai_generated"] = is_ai_generated
        template = await self.repo.create_with_clauses(fields, data.clause_ids)
        logger.info(
            f"Template created: id={template.id} name={template.template_name!r} "
            f"clauses={len(data.clause_ids)}"
        )
        return TemplateResponse.model_validate(template)

    async def update_template(self, template_id: uuid.UUID, data: TemplateUpdate) -> TemplateResponse:
        fields = data.model_dump(exclude_unset=True)
        for required in ("template_name", "document_type"):
            if required in fields and fields[required] is None:
                raise InvalidInputError(f"{required} cannot be null")
        template = await self.repo.update(template_id, **fields)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return TemplateResponse.model_validate(template)

    async def delete_template(self, template_id: uuid.UUID) -> None:
        if not await self.repo.delete(template_id):
            raise TemplateNotFoundError(template_id)
        logger.info(f"Template deleted: id={template_id}")

    async def add_clause(
        self, template_id: uuid.UUID, clause_id: uuid.UUID, position: int | None = None
    ) -> TemplateResponse:
        template = await self.repo.add_clause(template_id, clause_id, position)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return TemplateResponse.model_validate(template)

    async def remove_clause(self, template_id: uuid.UUID, clause_id: uuid.UUID) -> TemplateResponse:
        template = await self.repo.remove_clause(template_id, clause_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return TemplateResponse.model_validate(template)

    async def generate_complete_with_ai(self, request: TemplateGenerateRequest) -> TemplateResponse:
        """Draft clauses, save them under category=document_type, then build the template in that order."""
        if self.clause_service is None:
            raise RuntimeError("ClauseService must be injected to generate templates")

        drafts = await self.clause_service.generate_clauses(request.document_type, request.context)
        saved = await self.clause_service.create_many(
            [
                ClauseCreate(
                    clause_type=draft.clause_type,
                    content=draft.content,
                    category=request.document_type,
                    is_ai_generated=True,
                )
                for draft in drafts
            ]
        )

        return await self.create_template(
            TemplateCreate(
                template_name=request.template_name,
                document_type=request.document_type,
                description=request.description or f"AI-generated template for {request.document_type}",
                clause_ids=[clause.id for clause in saved],
            ),
            is_ai_generated=True,
        )
