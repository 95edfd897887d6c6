import logging
import uuid

from fastapi import APIRouter, Depends, Query, status

from app.schemas.clause import (
    ClauseCreate,
    ClauseGenerateRequest,
    ClauseGenerateSingleRequest,
    ClauseResponse,
    ClauseUpdate,
    CloneClauseRequest,
    GeneratedClause,
    SampleFlagRequest,
    SaveGeneratedRequest,
)
from app.services.clause_service import ClauseService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clauses", tags=["Clause Library"])


def get_clause_service() -> ClauseService:
    # Placeholder: overridden in create_app() with a session-bound service
    raise NotImplementedError("Dependency override not configured")


@router.get("", response_model=list[ClauseResponse])
async def list_clauses(
    category: str | None = Query(None),
    clause_type: str | None = Query(None),
    is_sample: bool | None = Query(None),
    service: ClauseService = Depends(get_clause_service),
):
    return await service.list_clauses(category=category, clause_type=clause_type, is_sample=is_sample)


@router.get("/samples", response_model=list[ClauseResponse])
async def list_sample_clauses(
    category: str | None = Query(None),
    service: ClauseService = Depends(get_clause_service),
):
    return await service.list_clauses(category=category, is_sample=True)


@router.get("/category/{category}", response_model=list[ClauseResponse])
async def list_clauses_by_category(category: str, service: ClauseService = Depends(get_clause_service)):
    return await service.list_clauses(category=category)


@router.post("/manual", response_model=ClauseResponse, status_code=status.HTTP_201_CREATED)
async def create_clause(body: ClauseCreate, service: ClauseService = Depends(get_clause_service)):
    """Create a clause. A clause_type already used in the category gets a numeric suffix."""
    logger.info(f"Create clause: clause_type={body.clause_type!r} category={body.category!r}")
    return await service.create_clause(body)


@router.post("/generate", response_model=list[GeneratedClause])
async def generate_clauses(body: ClauseGenerateRequest, service: ClauseService = Depends(get_clause_service)):
    """Draft clauses with the LLM for review. Nothing is saved."""
    logger.info(f"Generate clauses: document_type={body.document_type!r}")
    return await service.generate_clauses(body.document_type, body.context, category=body.category)


@router.post("/generate-single", response_model=ClauseResponse, status_code=status.HTTP_201_CREATED)
async def generate_single_clause(
    body: ClauseGenerateSingleRequest, service: ClauseService = Depends(get_clause_service)
):
    logger.info(f"Generate single clause: clause_type={body.clause_type!r} category={body.category!r}")
    return await service.generate_single(body.clause_type, body.category, body.context)


@router.post("/save-generated", response_model=list[ClauseResponse], status_code=status.HTTP_201_CREATED)
async def save_generated_clauses(body: SaveGeneratedRequest, service: ClauseService = Depends(get_clause_service)):
    """Save reviewed AI drafts in order, renaming any that collide."""
    items = [clause.model_copy(update={"is_ai_generated": True}) for clause in body.clauses]
    saved = await service.create_many(items)
    logger.info(f"Saved generated clauses: count={len(saved)}")
    return saved


@router.post("/{clause_id}/clone", response_model=ClauseResponse, status_code=status.HTTP_201_CREATED)
async def clone_sample_clause(
    clause_id: uuid.UUID,
    body: CloneClauseRequest,
    service: ClauseService = Depends(get_clause_service),
):
    logger.info(f"Clone clause: clause_id={clause_id} category={body.category!r}")
    return await service.clone_sample(clause_id, category=body.category, clause_type=body.clause_type)


@router.patch("/{clause_id}/sample", response_model=ClauseResponse)
async def mark_clause_as_sample(
    clause_id: uuid.UUID,
    body: SampleFlagRequest,
    service: ClauseService = Depends(get_clause_service),
):
    return await service.set_sample(clause_id, body.is_sample)


@router.get("/{clause_id}", response_model=ClauseResponse)
async def get_clause(clause_id: uuid.UUID, service: ClauseService = Depends(get_clause_service)):
    return await service.get_clause(clause_id)


@router.put("/{clause_id}", response_model=ClauseResponse)
async def update_clause(
    clause_id: uuid.UUID,
    body: ClauseUpdate,
    service: ClauseService = Depends(get_clause_service),
):
    logger.info(f"Update clause: clause_id={clause_id}")
    return await service.update_clause(clause_id, body)


@router.delete("/{clause_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_clause(clause_id: uuid.UUID, service: ClauseService = Depends(get_clause_service)):
    logger.info(f"Delete clause: clause_id={clause_id}")
    await service.delete_clause(clause_id)
