import logging
import uuid

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile, status

from app.exceptions import InvalidInputError
from app.routers.translations import get_translation_service
from app.schemas.document import (
    DocumentContentResponse,
    DocumentGenerateRequest,
    DocumentResponse,
    DocumentUpdate,
    PdfSaveResponse,
)
from app.schemas.translation import DocumentTranslatePreviewRequest, TranslationPreviewResponse
from app.services.bulk_service import BulkArchive, BulkDocumentService
from app.services.document_service import DocumentService
from app.services.translation_service import TranslationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])

SPREADSHEET_EXTENSIONS = {".xlsx"}


def get_document_service() -> DocumentService:
    # Placeholder: overridden in create_app() with a session-bound service
    raise NotImplementedError("Dependency override not configured")


def get_bulk_service() -> BulkDocumentService:
    # Placeholder: overridden in create_app() with a session-bound service
    raise NotImplementedError("Dependency override not configured")


async def _read_spreadsheet(request: Request, file: UploadFile) -> bytes:
    filename = file.filename or ""
    if not any(filename.lower().endswith(ext) for ext in SPREADSHEET_EXTENSIONS):
        raise InvalidInputError(f"Unsupported spreadsheet {filename!r}: upload an .xlsx file")

    content = await file.read()
    if not content:
        raise InvalidInputError("Uploaded spreadsheet is empty")

    max_bytes = request.app.state.settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise InvalidInputError(f"Spreadsheet exceeds {request.app.state.settings.MAX_UPLOAD_SIZE_MB} MB")
    return content


def _zip_response(archive: BulkArchive) -> Response:
    return Response(
        content=archive.content,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{archive.filename}"',
            "X-Document-Count": str(len(archive.document_ids)),
        },
    )


@router.get("", response_model=list[DocumentResponse])
async def list_documents(
    document_type: str | None = Query(None),
    template_id: uuid.UUID | None = Query(None),
    service: DocumentService = Depends(get_document_service),
):
    return await service.list_documents(document_type=document_type, template_id=template_id)


@router.post("/generate", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def generate_document(body: DocumentGenerateRequest, service: DocumentService = Depends(get_document_service)):
    """Create a document from content_json, from a template, or fully with AI."""
    logger.info(
        f"Generate document: template_id={body.template_id} document_type={body.document_type!r} "
        f"direct={body.content_json is not None}"
    )
    return await service.generate(body)


@router.post("/bulk/template")
async def bulk_generate_from_template(
    request: Request,
    template_id: uuid.UUID = Form(...),
    file: UploadFile = File(...),
    service: BulkDocumentService = Depends(get_bulk_service),
):
    """One PDF per spreadsheet row, filled from the template, returned as a zip."""
    logger.info(f"Bulk template request: template_id={template_id} filename={file.filename!r}")
    content = await _read_spreadsheet(request, file)
    archive = await service.from_template(template_id, content)
    logger.info(f"Bulk template response: filename={archive.filename} documents={len(archive.document_ids)}")
    return _zip_response(archive)


@router.post("/bulk/ai")
async def bulk_generate_with_ai(
    request: Request,
    document_type: str = Form(...),
    file: UploadFile = File(...),
    service: BulkDocumentService = Depends(get_bulk_service),
):
    """One AI-drafted PDF per spreadsheet row, returned as a zip."""
    logger.info(f"Bulk AI request: document_type={document_type!r} filename={file.filename!r}")
    content = await _read_spreadsheet(request, file)
    archive = await service.from_ai(document_type, content)
    logger.info(f"Bulk AI response: filename={archive.filename} documents={len(archive.document_ids)}")
    return _zip_response(archive)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: uuid.UUID, service: DocumentService = Depends(get_document_service)):
    return await service.get_document(document_id)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: uuid.UUID,
    body: DocumentUpdate,
    service: DocumentService = Depends(get_document_service),
):
    return await service.update_document(document_id, body)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: uuid.UUID, service: DocumentService = Depends(get_document_service)):
    logger.info(f"Delete document: document_id={document_id}")
    await service.delete_document(document_id)


@router.get("/{document_id}/content", response_model=DocumentContentResponse)
async def get_document_content(
    document_id: uuid.UUID,
    lang: str = Query("en"),
    service: TranslationService = Depends(get_translation_service),
):
    """Document text in lang; falls back to English when no confirmed translation exists."""
    return await service.get_document_content(document_id, lang)


@router.get("/{document_id}/pdf")
async def download_document_pdf(
    document_id: uuid.UUID,
    lang: str = Query("en"),
    translation_id: uuid.UUID | None = Query(None),
    service: DocumentService = Depends(get_document_service),
):
    """PDF in English, in a confirmed translation, or bilingual with lang=both."""
    logger.info(f"PDF request: document_id={document_id} lang={lang}")
    pdf, filename = await service.render_pdf(document_id, lang, translation_id)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/{document_id}/pdf/save", response_model=PdfSaveResponse)
async def save_document_pdf(document_id: uuid.UUID, service: DocumentService = Depends(get_document_service)):
    logger.info(f"PDF save request: document_id={document_id}")
    return await service.save_pdf(document_id)


@router.post(
    "/{document_id}/translate-preview",
    response_model=TranslationPreviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def preview_document_translation(
    document_id: uuid.UUID,
    body: DocumentTranslatePreviewRequest,
    service: TranslationService = Depends(get_translation_service),
):
    """Translate the document's assembled content into a confirmable preview."""
    logger.info(f"Document translation preview: document_id={document_id} lang={body.lang}")
    return await service.create_preview(
        lang=body.lang,
        original_id=document_id,
        original_type="document",
        created_by=body.created_by,
    )
