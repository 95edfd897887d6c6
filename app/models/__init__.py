from app.models.base import Base
from app.models.clause import Clause
from app.models.document import Document
from app.models.llm_usage_log import LLMUsageLog
from app.models.template import Template, TemplateClause
from app.models.translation import Translation, TranslationPreview

__all__ = [
    "Base",
    "Clause",
    "Template",
    "TemplateClause",
    "Document",
    "TranslationPreview",
    "Translation",
    "LLMUsageLog",
]
