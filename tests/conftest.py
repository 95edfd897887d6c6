"""
Shared fixtures: an in-memory SQLite database, a scripted LLM, a PDF renderer
that skips WeasyPrint, and an .xlsx builder.
"""

import io
import os
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

# Settings are read when app.main is imported, so the environment comes first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DATABASE_URL_SYNC", "sqlite://")
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest
import pytest_asyncio
from openpyxl import Workbook
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Base
from app.services.llm.base import LLMProvider, LLMResponse
from app.services.pdf_service import PDFRenderer

FIXED_NOW = datetime(2025, 3, 14, 9, 30, 0, tzinfo=timezone.utc)


class FakeLLM(LLMProvider):
    """Returns scripted answers in order; the last one repeats. Exceptions are raised."""

    provider_name = "fake"

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls: list[dict] = []

    async def complete(self, messages, temperature=0.0, max_tokens=2000, response_format=None):
        self.calls.append(
            {"messages": messages, "temperature": temperature, "response_format": response_format}
        )
        answer = self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]
        if isinstance(answer, Exception):
            raise answer
        return LLMResponse(content=answer, input_tokens=12, output_tokens=34, model="gpt-4o-mini", latency_ms=7)


class FakePDFRenderer(PDFRenderer):
    """Builds the real page HTML but returns it as the "PDF" bytes instead of calling WeasyPrint."""

    def __init__(self, fail_when: str | None = None):
        super().__init__(company_name="Acme Corp")
        self.fail_when = fail_when
        self.pages: list[str] = []

    def _write_pdf(self, page_html: str) -> bytes:
        if self.fail_when and self.fail_when in page_html:
            raise RuntimeError("renderer exploded")
        self.pages.append(page_html)
        return b"%PDF-1.7\n" + page_html.encode("utf-8")


class InMemoryDocumentRepository:
    def __init__(self):
        self.documents: dict[uuid.UUID, SimpleNamespace] = {}
        self.commits = 0

    async def create(self, **kwargs):
        document = SimpleNamespace(
            id=uuid.uuid4(),
            template_id=kwargs.get("template_id"),
            document_name=kwargs["document_name"],
            document_type=kwargs["document_type"],
            content_json=kwargs.get("content_json") or {},
            variables=kwargs.get("variables") or {},
            pdf_path=kwargs.get("pdf_path"),
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self.documents[document.id] = document
        return document

    async def get_by_id(self, document_id):
        return self.documents.get(document_id)

    async def list(self, document_type=None, template_id=None):
        return [
            d for d in self.documents.values()
            if (not document_type or d.document_type == document_type)
            and (not template_id or d.template_id == template_id)
        ]

    async def update(self, document_id, **fields):
        document = self.documents.get(document_id)
        if document is None:
            return None
        for name, value in fields.items():
            setattr(document, name, value)
        return document

    async def delete(self, document_id):
        return self.documents.pop(document_id, None) is not None

    async def commit(self):
        self.commits += 1


class InMemoryTemplateRepository:
    def __init__(self, *templates):
        self.templates = {t.id: t for t in templates}

    async def get_by_id(self, template_id):
        return self.templates.get(template_id)


def make_template(name="Offer Letter", document_type="offer_letter", clauses=("Dear [Name],",)):
    return SimpleNamespace(
        id=uuid.uuid4(),
        template_name=name,
        document_type=document_type,
        clauses=[
            SimpleNamespace(clause_type=f"clause-{i}", content=content, category=document_type)
            for i, content in enumerate(clauses, start=1)
        ],
    )


def make_xlsx(headers: list, rows: list[list]) -> bytes:
    """Build an .xlsx file in memory with headers in row 1."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(headers)
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def renderer():
    return FakePDFRenderer()


@pytest.fixture
def document_repo():
    return InMemoryDocumentRepository()


@pytest_asyncio.fixture
async def session():
    """A fresh in-memory SQLite database per test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as db_session:
        yield db_session

    await engine.dispose()
