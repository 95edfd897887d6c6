"""
HTTP tests: routing, dependency overrides and the error payload shape.
"""

import io
import uuid
import zipfile
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app.exceptions import PreviewNotFoundError
from app.main import create_app
from app.routers.documents import get_bulk_service, get_document_service
from app.routers.translations import get_translation_service
from app.schemas.translation import TranslationConfirmResponse, TranslationPreviewResponse
from app.services.bulk_service import BulkDocumentService
from app.services.document_service import DocumentService
from app.services.translation_service import TranslationService
from conftest import (
    FIXED_NOW,
    FakePDFRenderer,
    InMemoryDocumentRepository,
    InMemoryTemplateRepository,
    make_template,
    make_xlsx,
)

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def template():
    return make_template(clauses=("Dear [Name],",))


@pytest.fixture
def bulk_app(app, template):
    documents = InMemoryDocumentRepository()
    service = BulkDocumentService(
        InMemoryTemplateRepository(template), documents, FakePDFRenderer(), clock=lambda: FIXED_NOW
    )
    app.dependency_overrides[get_bulk_service] = lambda: service
    return app


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_unsafe_request_id_is_replaced(self, client):
        response = client.get("/health", headers={"X-Request-ID": "bad id with spaces!"})
        assert response.headers["X-Request-ID"] != "bad id with spaces!"
        uuid.UUID(response.headers["X-Request-ID"])


class TestBulkEndpoints:
    def test_template_bulk_returns_zip(self, bulk_app, template):
        client = TestClient(bulk_app)

        response = client.post(
            "/api/v1/documents/bulk/template",
            data={"template_id": str(template.id)},
            files={"file": ("people.xlsx", make_xlsx(["Name"], [["Alice"], ["Bob"]]), XLSX)},
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="bulk_documents_20250314_093000.zip"' in response.headers["content-disposition"]
        assert response.headers["X-Document-Count"] == "2"
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            assert archive.namelist() == ["OfferLetter_Alice.pdf", "OfferLetter_Bob.pdf"]

    def test_missing_column_payload(self, bulk_app, template):
        client = TestClient(bulk_app)

        response = client.post(
            "/api/v1/documents/bulk/template",
            data={"template_id": str(template.id)},
            files={"file": ("people.xlsx", make_xlsx(["Email"], [["a@example.com"]]), XLSX)},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "Name" in body["message"]
        assert body["errors"] == {"missing_columns": ["Name"]}

    def test_row_error_payload(self, bulk_app, template):
        client = TestClient(bulk_app)

        response = client.post(
            "/api/v1/documents/bulk/template",
            data={"template_id": str(template.id)},
            files={"file": ("people.xlsx", make_xlsx(["Name", "Email"], [[None, "a@example.com"]]), XLSX)},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"].startswith("Row 2")
        assert body["errors"] == {"row": 2, "fields": ["Name"], "document_ids": []}

    def test_unknown_template_is_404(self, bulk_app):
        client = TestClient(bulk_app)

        response = client.post(
            "/api/v1/documents/bulk/template",
            data={"template_id": str(uuid.uuid4())},
            files={"file": ("people.xlsx", make_xlsx(["Name"], [["Alice"]]), XLSX)},
        )

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_non_xlsx_upload_rejected(self, bulk_app, template):
        client = TestClient(bulk_app)

        response = client.post(
            "/api/v1/documents/bulk/template",
            data={"template_id": str(template.id)},
            files={"file": ("people.csv", b"Name\nAlice\n", "text/csv")},
        )

        assert response.status_code == 400
        assert ".xlsx" in response.json()["message"]


class TestDocumentEndpoints:
    def test_pdf_download(self, app):
        documents = InMemoryDocumentRepository()
        service = DocumentService(documents, translation_repo=AsyncMock(), pdf_renderer=FakePDFRenderer())
        app.dependency_overrides[get_document_service] = lambda: service
        client = TestClient(app)

        created = client.post(
            "/api/v1/documents/generate",
            json={
                "document_name": "Offer Alice",
                "document_type": "offer_letter",
                "content_json": {"clauses": [{"content": "<p>Hello Alice</p>"}]},
            },
        )
        assert created.status_code == 201
        document_id = created.json()["id"]

        response = client.get(f"/api/v1/documents/{document_id}/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert f'filename="document_{document_id}_en.pdf"' in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")

    def test_unknown_document_is_404(self, app):
        service = DocumentService(InMemoryDocumentRepository(), pdf_renderer=FakePDFRenderer())
        app.dependency_overrides[get_document_service] = lambda: service

        response = TestClient(app).get(f"/api/v1/documents/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["errors"] is None


class TestTranslationEndpoints:
    def test_preview_then_confirm(self, app):
        preview_id = uuid.uuid4()
        translation_id = uuid.uuid4()
        service = AsyncMock(spec=TranslationService)
        service.create_preview.return_value = TranslationPreviewResponse(
            preview_id=preview_id, translated="Bonjour", expires_at=datetime(2025, 3, 14, 10, 0, tzinfo=timezone.utc)
        )
        service.confirm_preview.return_value = TranslationConfirmResponse(translation_id=translation_id)
        app.dependency_overrides[get_translation_service] = lambda: service
        client = TestClient(app)
        original_id = uuid.uuid4()

        preview = client.post(
            "/api/v1/translations/preview",
            json={"original_id": str(original_id), "lang": "fr", "text": "Hello", "created_by": "alice"},
        )
        confirm = client.post(
            "/api/v1/translations/confirm", json={"preview_id": preview.json()["preview_id"], "user_id": "bob"}
        )

        assert preview.status_code == 201
        assert preview.json()["translated"] == "Bonjour"
        assert confirm.status_code == 200
        assert confirm.json() == {"translation_id": str(translation_id)}
        service.create_preview.assert_awaited_once_with(
            lang="fr", original_id=original_id, original_type="document", text="Hello", created_by="alice"
        )
        service.confirm_preview.assert_awaited_once_with(preview_id, "bob")

    def test_expired_preview_is_404(self, app):
        preview_id = uuid.uuid4()
        service = AsyncMock(spec=TranslationService)
        service.confirm_preview.side_effect = PreviewNotFoundError(preview_id)
        app.dependency_overrides[get_translation_service] = lambda: service

        response = TestClient(app).post("/api/v1/translations/confirm", json={"preview_id": str(preview_id)})

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": f"Translation preview {preview_id} not found or expired",
            "errors": None,
        }

    def test_lang_is_validated(self, app):
        app.dependency_overrides[get_translation_service] = lambda: AsyncMock(spec=TranslationService)

        response = TestClient(app).post(
            "/api/v1/translations/preview", json={"original_id": str(uuid.uuid4()), "lang": "f"}
        )

        assert response.status_code == 422


class TestErrorPayloads:
    def test_missing_body_field_uses_error_shape(self, app):
        app.dependency_overrides[get_translation_service] = lambda: AsyncMock(spec=TranslationService)

        response = TestClient(app).post("/api/v1/translations/preview", json={"text": "Hello"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert "body.lang" in body["message"]
        assert body["errors"][0]["loc"] == ["body", "lang"]

    def test_missing_form_fields_use_error_shape(self, bulk_app):
        response = TestClient(bulk_app).post("/api/v1/documents/bulk/template", data={"note": "x"})

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert "body.template_id" in body["message"]
        assert "body.file" in body["message"]

    def test_malformed_uuid_uses_error_shape(self, app):
        service = DocumentService(InMemoryDocumentRepository(), pdf_renderer=FakePDFRenderer())
        app.dependency_overrides[get_document_service] = lambda: service

        response = TestClient(app).get("/api/v1/documents/not-a-uuid")

        assert response.status_code == 422
        assert response.json()["success"] is False
        assert "path.document_id" in response.json()["message"]

    def test_unexpected_error_uses_error_shape(self, app):
        service = AsyncMock(spec=DocumentService)
        service.get_document.side_effect = RuntimeError("connection reset")
        app.dependency_overrides[get_document_service] = lambda: service

        response = TestClient(app, raise_server_exceptions=False).get(f"/api/v1/documents/{uuid.uuid4()}")

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error", "errors": None}
