import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import aiofiles

from app.exceptions import (
    DocumentNotFoundError,
    InvalidInputError,
    PDFRenderError,
    TemplateNotFoundError,
    TranslationNotFoundError,
)
from app.repositories.document_repo import DocumentRepository
from app.repositories.template_repo import TemplateRepository
from app.repositories.translation_repo import TranslationRepository
from app.schemas.document import DocumentGenerateRequest, DocumentResponse, DocumentUpdate, PdfSaveResponse
from app.services.clause_service import ClauseService
from app.services.pdf_service import PDFRenderer
from app.services.placeholders import clean_for_filename, substitute
from app.services.translation_service import SOURCE_LANG, assemble_document_text

logger = logging.getLogger(__name__)

BILINGUAL = "both"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentService:
    def __init__(
        self,
        repo: DocumentRepository,
        template_repo: TemplateRepository | None = None,
        translation_repo: TranslationRepository | None = None,
        clause_service: ClauseService | None = None,
        pdf_renderer: PDFRenderer | None = None,
        pdf_output_dir: str = "generated_pdfs",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.repo = repo
        self.template_repo = template_repo
        self.translation_repo = translation_repo
        self.clause_service = clause_service
        self.pdf_renderer = pdf_renderer
        self.pdf_output_dir = pdf_output_dir
        self.clock = clock

    async def generate(self, request: DocumentGenerateRequest) -> DocumentResponse:
        """Create a document from direct content, a template, or LLM-drafted clauses."""
        if request.content_json is not None:
            if not request.document_name or not request.document_type:
                raise InvalidInputError("document_name and document_type are required when content_json is given")
            document = await self.repo.create(
                template_id=request.template_id,
                document_name=request.document_name,
                document_type=request.document_type,
                content_json=request.content_json.model_dump(),
                variables=request.context,
            )
            logger.info(f"Document saved from content: id={document.id}")
            return DocumentResponse.model_validate(document)

        if request.template_id is not None:
            return await self._generate_from_template(request)

        return await self._generate_with_ai(request)

    async def _generate_from_template(self, request: DocumentGenerateRequest) -> DocumentResponse:
        template = await self.template_repo.get_by_id(request.template_id)
        if template is None:
            raise TemplateNotFoundError(request.template_id)

        clauses = [
            {
                "clause_type": clause.clause_type,
                "content": substitute(clause.content, request.context),
                "category": clause.category,
            }
            for clause in template.clauses
        ]
        name = request.document_name or f"{template.template_name}_{self.clock().strftime('%Y%m%d%H%M%S')}"
        document = await self.repo.create(
            template_id=template.id,
            document_name=name,
            document_type=request.document_type or template.document_type,
            content_json={"clauses": clauses},
            variables=request.context,
        )
        logger.info(f"Document generated from template: id={document.id} template_id={template.id}")
        return DocumentResponse.model_validate(document)

    async def _generate_with_ai(self, request: DocumentGenerateRequest) -> DocumentResponse:
        if not request.document_type:
            raise InvalidInputError("document_type is required when no template_id or content_json is given")
        if self.clause_service is None:
            raise RuntimeError("ClauseService must be injected for AI document generation")

        drafts = await self.clause_service.generate_clauses(request.document_type, request.context)
        clauses = [
            {
                "clause_type": draft.clause_type,
                "content": substitute(draft.content, request.context),
                "category": draft.category,
            }
            for draft in drafts
        ]
        name = request.document_name or f"{request.document_type}_{self.clock().strftime('%Y%m%d%H%M%S')}"
        document = await self.repo.create(
            template_id=None,
            document_name=name,
            document_type=request.document_type,
            content_json={"clauses": clauses},
            variables=request.context,
        )
        logger.info(f"Document generated with AI: id={document.id} clauses={len(clauses)}")
        return DocumentResponse.model_validate(document)

    async def list_documents(
        self, document_type: str | None = None, template_id: uuid.UUID | None = None
    ) -> list[DocumentResponse]:
        documents = await self.repo.list(document_type=document_type, template_id=template_id)
        return [DocumentResponse.model_validate(d) for d in documents]

    async def get_document(self, document_id: uuid.UUID) -> DocumentResponse:
        return DocumentResponse.model_validate(await self._get(document_id))

    async def update_document(self, document_id: uuid.UUID, data: DocumentUpdate) -> DocumentResponse:
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        document = await self.repo.update(document_id, **fields)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return DocumentResponse.model_validate(document)

    async def delete_document(self, document_id: uuid.UUID) -> None:
        if not await self.repo.delete(document_id):
            raise DocumentNotFoundError(document_id)
        logger.info(f"Document deleted: id={document_id}")

    async def render_pdf(
        self, document_id: uuid.UUID, lang: str = SOURCE_LANG, translation_id: uuid.UUID | None = None
    ) -> tuple[bytes, str]:
        """Render the document as (pdf_bytes, download filename).

        lang="en" renders the original, any other code renders its confirmed
        translation, and "both" puts the original and the latest confirmed
        translation side by side.
        """
        document = await self._get(document_id)
        lang = (lang or SOURCE_LANG).strip()

        if lang == SOURCE_LANG:
            pdf = await self.pdf_renderer.render(document)
            suffix = SOURCE_LANG
        elif lang == BILINGUAL:
            translation = await self._confirmed_translation(document_id, None, translation_id)
            page = self.pdf_renderer.bilingual_html(
                document.document_name, assemble_document_text(document), translation.content, translation.lang
            )
            pdf = await self.pdf_renderer.render_from_html(page)
            suffix = "bilingual"
        else:
            translation = await self._confirmed_translation(document_id, lang, translation_id)
            page = self.pdf_renderer.document_html(
                document.document_name, [{"clause_type": "translated", "content": translation.content}]
            )
            pdf = await self.pdf_renderer.render_from_html(page)
            suffix = lang

        if not pdf:
            raise PDFRenderError(f"PDF rendering failed for document {document_id} (lang={lang})")
        return pdf, f"document_{document_id}_{clean_for_filename(suffix) or 'doc'}.pdf"

    async def save_pdf(self, document_id: uuid.UUID) -> PdfSaveResponse:
        """Render the English PDF into the output directory and record its path on the document."""
        pdf, _ = await self.render_pdf(document_id, SOURCE_LANG)
        document = await self._get(document_id)

        output_dir = Path(self.pdf_output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        stem = clean_for_filename(document.document_name) or "document"
        path = str(output_dir / f"{stem}_{document_id}_{self.clock().strftime('%Y%m%d%H%M%S')}.pdf")
        async with aiofiles.open(path, "wb") as f:
            await f.write(pdf)

        await self.repo.update(document_id, pdf_path=path)
        logger.info(f"PDF saved: document_id={document_id} path={path} bytes={len(pdf)}")
        return PdfSaveResponse(document_id=document_id, pdf_path=path, size_bytes=len(pdf))

    async def _get(self, document_id: uuid.UUID):
        document = await self.repo.get_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def _confirmed_translation(
        self, document_id: uuid.UUID, lang: str | None, translation_id: uuid.UUID | None
    ):
        translation = None
        if translation_id is not None:
            translation = await self.translation_repo.get_by_id(translation_id)
            if translation is not None and translation.original_id != document_id:
                translation = None
        if translation is None:
            translation = await self.translation_repo.get_latest_confirmed(document_id, "document", lang)
        if translation is None:
            raise TranslationNotFoundError(
                f"No confirmed translation for document {document_id}"
                + (f" in {lang!r}" if lang else "")
                + ". Preview and confirm one first."
            )
        return translation
