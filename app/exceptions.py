class ClausewrightError(Exception):
    """Base exception for all Clausewright errors."""

    status_code = 500

    def to_payload(self) -> dict:
        return {"success": False, "message": str(self), "errors": None}


class InvalidInputError(ClausewrightError):
    """Missing or invalid request fields."""

    status_code = 400


class MissingColumnsError(InvalidInputError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Spreadsheet is missing columns for placeholders: {', '.join(missing)}")

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["errors"] = {"missing_columns": self.missing}
        return payload


class RowValidationError(InvalidInputError):
    """A single spreadsheet row made the whole bulk request fail.

    `row` is the spreadsheet row number (the header is row 1). `document_ids`
    lists documents this request had already persisted before failing.
    """

    def __init__(self, row: int, message: str, fields: list[str] | None = None, document_ids: list | None = None):
        self.row = row
        self.fields = fields or []
        self.document_ids = list(document_ids or [])
        detail = f"Row {row}: {message}"
        if self.fields:
            detail += f" ({', '.join(self.fields)})"
        super().__init__(detail)

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["errors"] = {
            "row": self.row,
            "fields": self.fields,
            "document_ids": [str(i) for i in self.document_ids],
        }
        return payload


class NotFoundError(ClausewrightError):
    status_code = 404


class ClauseNotFoundError(NotFoundError):
    def __init__(self, clause_id):
        self.clause_id = clause_id
        super().__init__(f"Clause {clause_id} not found")


class TemplateNotFoundError(NotFoundError):
    def __init__(self, template_id):
        self.template_id = template_id
        super().__init__(f"Template {template_id} not found")


class DocumentNotFoundError(NotFoundError):
    def __init__(self, document_id):
        self.document_id = document_id
        super().__init__(f"Document {document_id} not found")


class TranslationNotFoundError(NotFoundError):
    pass


class PreviewNotFoundError(NotFoundError):
    def __init__(self, preview_id):
        self.preview_id = preview_id
        super().__init__(f"Translation preview {preview_id} not found or expired")


class UpstreamProviderError(ClausewrightError):
    """An AI or rendering collaborator failed. The message is returned to the caller."""

    status_code = 500


class LLMProviderError(UpstreamProviderError):
    """Raised when an LLM API call fails after all retries and fallback models."""
    pass


class ClauseGenerationError(UpstreamProviderError):
    """Raised when the LLM answered but the drafted clauses are unusable."""
    pass


class PDFRenderError(UpstreamProviderError):
    pass
