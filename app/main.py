import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import create_engine, create_session_factory, session_dependency
from app.exceptions import ClausewrightError
from app.middleware import RequestIDLogFilter, RequestIDMiddleware

logger = logging.getLogger(__name__)


def configure_logging(log_level: str) -> None:
    """Set up logging with request ID injected into every log line."""
    log_filter = RequestIDLogFilter()
    formatter = logging.Formatter(
        "%(asctime)s [%(request_id)s] %(levelname)s %(name)s: %(message)s"
    )

    # Replace existing handlers on the root logger rather than using basicConfig
    # (basicConfig is a no-op if handlers are already set, which uvicorn does at startup)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(log_filter)
    root_logger.addHandler(handler)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator:
    """Manage application lifecycle: DB engine, LLM client and PDF renderer live for the whole process."""
    from app.services.llm.factory import create_llm_provider
    from app.services.pdf_service import PDFRenderer

    settings: Settings = application.state.settings
    engine = create_engine(settings)
    application.state.engine = engine
    application.state.session_factory = create_session_factory(engine)
    application.state.llm = create_llm_provider(settings)
    application.state.pdf_renderer = PDFRenderer(company_name=settings.PDF_COMPANY_NAME)

    yield

    await application.state.engine.dispose()


def register_services(application: FastAPI, settings: Settings) -> None:
    """Bind every router's service placeholder to a real, session-scoped instance."""
    from app.repositories.clause_repo import ClauseRepository
    from app.repositories.document_repo import DocumentRepository
    from app.repositories.llm_usage_log_repo import LLMUsageLogRepository
    from app.repositories.template_repo import TemplateRepository
    from app.repositories.translation_repo import TranslationPreviewRepository, TranslationRepository
    from app.routers.clauses import get_clause_service
    from app.routers.documents import get_bulk_service, get_document_service
    from app.routers.templates import get_template_service
    from app.routers.translations import get_translation_service
    from app.services.bulk_service import BulkDocumentService
    from app.services.clause_service import ClauseService
    from app.services.document_service import DocumentService
    from app.services.template_service import TemplateService
    from app.services.translation_service import TranslationService

    # One session and one transaction per request
    get_session = session_dependency(lambda: application.state.session_factory)

    def clause_service_for(session: AsyncSession) -> ClauseService:
        return ClauseService(
            llm=application.state.llm,
            repo=ClauseRepository(session),
            usage_repo=LLMUsageLogRepository(session),
            temperature=settings.GENERATION_TEMPERATURE,
            max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
        )

    async def get_clause_service_with_session(session: AsyncSession = Depends(get_session)) -> ClauseService:
        return clause_service_for(session)

    async def get_template_service_with_session(session: AsyncSession = Depends(get_session)) -> TemplateService:
        return TemplateService(TemplateRepository(session), clause_service=clause_service_for(session))

    async def get_document_service_with_session(session: AsyncSession = Depends(get_session)) -> DocumentService:
        return DocumentService(
            DocumentRepository(session),
            template_repo=TemplateRepository(session),
            translation_repo=TranslationRepository(session),
            clause_service=clause_service_for(session),
            pdf_renderer=application.state.pdf_renderer,
            pdf_output_dir=settings.PDF_OUTPUT_DIR,
        )

    async def get_bulk_service_with_session(session: AsyncSession = Depends(get_session)) -> BulkDocumentService:
        return BulkDocumentService(
            TemplateRepository(session),
            DocumentRepository(session),
            application.state.pdf_renderer,
            clause_service=clause_service_for(session),
        )

    async def get_translation_service_with_session(
        session: AsyncSession = Depends(get_session),
    ) -> TranslationService:
        return TranslationService(
            llm=application.state.llm,
            preview_repo=TranslationPreviewRepository(session),
            translation_repo=TranslationRepository(session),
            document_repo=DocumentRepository(session),
            usage_repo=LLMUsageLogRepository(session),
            preview_ttl=timedelta(minutes=settings.TRANSLATION_PREVIEW_TTL_MINUTES),
            temperature=settings.TRANSLATION_TEMPERATURE,
            max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
        )

    application.dependency_overrides[get_clause_service] = get_clause_service_with_session
    application.dependency_overrides[get_template_service] = get_template_service_with_session
    application.dependency_overrides[get_document_service] = get_document_service_with_session
    application.dependency_overrides[get_bulk_service] = get_bulk_service_with_session
    application.dependency_overrides[get_translation_service] = get_translation_service_with_session


def create_app() -> FastAPI:
    """Application factory."""
    settings = Settings()

    application = FastAPI(
        title="Clausewright",
        description="Clause library, template assembly, bulk PDF generation and reviewed translations",
        version="0.1.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    application.state.settings = settings

    configure_logging(settings.LOG_LEVEL)
    application.add_middleware(RequestIDMiddleware)

    @application.exception_handler(ClausewrightError)
    async def handle_domain_error(request: Request, exc: ClausewrightError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: status={exc.status_code} {exc}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @application.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        fields = ", ".join(".".join(str(part) for part in error.get("loc", ())) for error in errors)
        logger.warning(f"{request.method} {request.url.path} rejected: status=422 fields={fields}")
        return JSONResponse(
            status_code=422,
            content={"success": False, "message": f"Invalid request: {fields}", "errors": errors},
        )

    @application.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"{request.method} {request.url.path} crashed: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error", "errors": None},
        )

    # Register routers
    from app.routers.clauses import router as clauses_router
    from app.routers.documents import router as documents_router
    from app.routers.templates import router as templates_router
    from app.routers.translations import router as translations_router

    application.include_router(clauses_router, prefix="/api/v1")
    application.include_router(templates_router, prefix="/api/v1")
    application.include_router(documents_router, prefix="/api/v1")
    application.include_router(translations_router, prefix="/api/v1")
    register_services(application, settings)

    @application.get("/health", tags=["Health Check"])
    async def health_check():
        return {"status": "healthy", "version": "0.1.0"}

    return application


app = create_app()
