import logging
import uuid

from fastapi import APIRouter, Depends, Query, status

from app.schemas.template import (
    AddClauseRequest,
    TemplateCreate,
    TemplateGenerateRequest,
    TemplateResponse,
    TemplateSave,
    TemplateUpdate,
)
from app.services.template_service import TemplateService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["Templates"])


def get_template_service() -> TemplateService:
    # Placeholder: overridden in create_app() with a session-bound service
    raise NotImplementedError("Dependency override not configured")


@router.get("", response_model=list[TemplateResponse])
async def list_templates(
    document_type: str | None = Query(None),
    service: TemplateService = Depends(get_template_service),
):
    return await service.list_templates(document_type=document_type)


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(body: TemplateCreate, service: TemplateService = Depends(get_template_service)):
    """Create a template; clause_ids are placed at positions 1..n in the given order."""
    logger.info(f"Create template: name={body.template_name!r} clauses={len(body.clause_ids)}")
    return await service.create_template(body)


@router.post("/save", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def save_template(body: TemplateSave, service: TemplateService = Depends(get_template_service)):
    logger.info(f"Save template: name={body.template_name!r} clauses={len(body.clause_ids)}")
    return await service.create_template(body)


@router.post("/generate-ai", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def generate_template_with_ai(
    body: TemplateGenerateRequest, service: TemplateService = Depends(get_template_service)
):
    """Draft clauses with the LLM, save them, and build a template from them."""
    logger.info(f"Generate AI template: name={body.template_name!r} document_type={body.document_type!r}")
    return await service.generate_complete_with_ai(body)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: uuid.UUID, service: TemplateService = Depends(get_template_service)):
    return await service.get_template(template_id)


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: uuid.UUID,
    body: TemplateUpdate,
    service: TemplateService = Depends(get_template_service),
):
    return await service.update_template(template_id, body)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(template_id: uuid.UUID, service: TemplateService = Depends(get_template_service)):
    """Delete a template. Its clauses stay in the library."""
    logger.info(f"Delete template: template_id={template_id}")
    await service.delete_template(template_id)


@router.post("/{template_id}/clauses", response_model=TemplateResponse)
async def add_clause_to_template(
    template_id: uuid.UUID,
    body: AddClauseRequest,
    service: TemplateService = Depends(get_template_service),
):
    logger.info(f"Add clause to template: template_id={template_id} clause_id={body.clause_id} position={body.position}")
    return await service.add_clause(template_id, body.clause_id, body.position)


@router.delete("/{template_id}/clauses/{clause_id}", response_model=TemplateResponse)
async def remove_clause_from_template(
    template_id: uuid.UUID,
    clause_id: uuid.UUID,
    service: TemplateService = Depends(get_template_service),
):
    logger.info(f"Remove clause from template: template_id={template_id} clause_id={clause_id}")
    return await service.remove_clause(template_id, clause_id)
