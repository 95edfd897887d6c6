import io
import logging
import uuid
import zipfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from app.exceptions import (
    InvalidInputError,
    MissingColumnsError,
    RowValidationError,
    TemplateNotFoundError,
    UpstreamProviderError,
)
from app.repositories.document_repo import DocumentRepository
from app.repositories.template_repo import TemplateRepository
from app.services.clause_service import ClauseService
from app.services.pdf_service import PDFRenderer
from app.services.placeholders import (
    clean_for_filename,
    derive_primary_identifier,
    extract_placeholders_ordered,
    normalize_key,
    substitute,
    template_base_name,
)
from app.services.spreadsheet import SheetRow, read_first_sheet

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class BulkArchive:
    content: bytes
    filename: str
    document_ids: list[uuid.UUID] = field(default_factory=list)
    entry_names: list[str] = field(default_factory=list)


@dataclass
class _RowPlan:
    row: SheetRow
    values: dict[str, str]
    filename: str


def match_columns(required: list[str], headers: list[str]) -> None:
    """Every placeholder needs a header equal to it, raw or normalized."""
    raw = set(headers)
    normalized = {normalize_key(h) for h in headers}
    missing = [name for name in required if name not in raw and normalize_key(name) not in normalized]
    if missing:
        raise MissingColumnsError(missing)


def resolve_row_values(required: list[str], row_values: dict[str, str]) -> dict[str, str]:
    """Value of each placeholder for one row: raw header, then normalized header, then ""."""
    by_normalized: dict[str, str] = {}
    for header, value in row_values.items():
        by_normalized.setdefault(normalize_key(header), value)

    values = {}
    for name in required:
        if name in row_values:
            values[name] = row_values[name]
        else:
            values[name] = by_normalized.get(normalize_key(name), "")
    return values


class BulkDocumentService:
    """Builds one document and one PDF per spreadsheet row and zips the PDFs.

    Rows run strictly in sheet order, one at a time. Any row failure aborts
    the whole request; documents already committed for earlier rows are kept
    and reported on the error.
    """

    def __init__(
        self,
        template_repo: TemplateRepository | None,
        document_repo: DocumentRepository,
        pdf_renderer: PDFRenderer,
        clause_service: ClauseService | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.template_repo = template_repo
        self.document_repo = document_repo
        self.pdf_renderer = pdf_renderer
        self.clause_service = clause_service
        self.clock = clock

    async def from_template(self, template_id: uuid.UUID, spreadsheet: bytes) -> BulkArchive:
        template = await self.template_repo.get_by_id(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        clauses = template.clauses
        if not clauses:
            raise InvalidInputError(f"Template {template_id} has no clauses")

        sheet = read_first_sheet(spreadsheet)
        if not sheet.rows:
            raise InvalidInputError("Spreadsheet has no data rows")

        required = extract_placeholders_ordered(clauses)
        match_columns(required, sheet.headers)

        # Every row is checked before anything is written
        base_name = template_base_name(template.template_name)
        plans = [self._plan_template_row(row, required, base_name) for row in sheet.rows]
        logger.info(
            f"Bulk template run validated: template_id={template_id} rows={len(plans)} "
            f"placeholders={len(required)}"
        )

        entries: dict[str, bytes] = {}
        document_ids: list[uuid.UUID] = []
        for plan in plans:
            filled = [
                {
                    "clause_type": clause.clause_type,
                    "content": substitute(clause.content, plan.values),
                    "category": clause.category,
                }
                for clause in clauses
            ]
            await self._assemble_row(
                plan.row,
                plan.filename,
                entries,
                document_ids,
                template_id=template.id,
                document_type=template.document_type,
                clauses=filled,
            )

        return self._package(entries, document_ids, prefix="bulk_documents")

    async def from_ai(self, document_type: str, spreadsheet: bytes) -> BulkArchive:
        if not document_type or not document_type.strip():
            raise InvalidInputError("document_type is required")
        if self.clause_service is None:
            raise RuntimeError("ClauseService must be injected for AI bulk generation")

        sheet = read_first_sheet(spreadsheet)
        if not sheet.rows:
            raise InvalidInputError("Spreadsheet has no data rows")

        type_name = clean_for_filename(document_type)
        entries: dict[str, bytes] = {}
        document_ids: list[uuid.UUID] = []
        for row in sheet.rows:
            context = {header: value for header, value in row.values.items() if value.strip()}
            try:
                drafts = await self.clause_service.generate_clauses(document_type, context)
            except UpstreamProviderError as e:
                raise RowValidationError(row.number, f"clause generation failed: {e}", document_ids=document_ids)

            values = resolve_row_values(extract_placeholders_ordered(d.model_dump() for d in drafts), row.values)
            filled = [
                {
                    "clause_type": draft.clause_type,
                    "content": substitute(draft.content, values),
                    "category": draft.category,
                }
                for draft in drafts
            ]
            identifier = derive_primary_identifier(row.values)
            await self._assemble_row(
                row,
                f"{type_name}_{self._file_identifier(row, identifier)}",
                entries,
                document_ids,
                template_id=None,
                document_type=document_type,
                clauses=filled,
            )

        return self._package(entries, document_ids, prefix="AI_Bulk_Documents")

    def _plan_template_row(self, row: SheetRow, required: list[str], base_name: str) -> _RowPlan:
        values = resolve_row_values(required, row.values)
        empty = [name for name, value in values.items() if not str(value).strip()]
        if empty:
            raise RowValidationError(row.number, "missing values for required fields", fields=empty)

        identifier = derive_primary_identifier(row.values)
        if identifier is None:
            raise RowValidationError(row.number, "no identifying value (such as a name) found")

        return _RowPlan(row=row, values=values, filename=f"{base_name}_{self._file_identifier(row, identifier)}")

    @staticmethod
    def _file_identifier(row: SheetRow, identifier: str | None) -> str:
        # Names without ASCII letters or digits (e.g. "张三") clean to nothing
        cleaned = clean_for_filename(identifier)
        return cleaned or f"Row{row.number}"

    async def _assemble_row(
        self,
        row: SheetRow,
        filename: str,
        entries: dict[str, bytes],
        document_ids: list[uuid.UUID],
        *,
        template_id: uuid.UUID | None,
        document_type: str,
        clauses: list[dict],
    ) -> None:
        document = await self.document_repo.create(
            template_id=template_id,
            document_name=filename,
            document_type=document_type,
            content_json={"clauses": clauses},
            variables=dict(row.values),
        )
        # Committed right away: a later row failing does not undo this row's document
        await self.document_repo.commit()
        document_ids.append(document.id)

        pdf = await self.pdf_renderer.render(document)
        if not pdf:
            raise RowValidationError(row.number, "PDF rendering produced no output", document_ids=document_ids)

        if filename in entries:
            logger.warning(f"Duplicate archive entry overwritten: name={filename}.pdf row={row.number}")
        entries[filename] = pdf
        logger.info(f"Bulk row assembled: row={row.number} document_id={document.id} bytes={len(pdf)}")

    def _package(self, entries: dict[str, bytes], document_ids: list[uuid.UUID], prefix: str) -> BulkArchive:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
            for name, pdf in entries.items():
                archive.writestr(f"{name}.pdf", pdf)

        filename = f"{prefix}_{self.clock().strftime('%Y%m%d_%H%M%S')}.zip"
        logger.info(f"Bulk archive packaged: filename={filename} entries={len(entries)} documents={len(document_ids)}")
        return BulkArchive(
            content=buffer.getvalue(),
            filename=filename,
            document_ids=list(document_ids),
            entry_names=[f"{name}.pdf" for name in entries],
        )
