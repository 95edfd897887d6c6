import asyncio
import html
import logging
import re

import bleach

logger = logging.getLogger(__name__)

HTML_TAG = re.compile(r"<[a-z][\s\S]*>", re.IGNORECASE)

ALLOWED_HTML_TAGS = [
    "p", "br", "div", "span", "h1", "h2", "h3", "h4", "h5", "h6",
    "strong", "b", "em", "i", "u", "strike", "del", "ins",
    "ul", "ol", "li", "dl", "dt", "dd",
    "blockquote", "pre", "code",
    "table", "thead", "tbody", "tr", "th", "td",
    "hr", "sub", "sup", "small", "mark",
]

ALLOWED_HTML_ATTRIBUTES = {
    "*": ["class"],
    "table": ["border", "cellpadding", "cellspacing"],
    "th": ["colspan", "rowspan", "scope"],
    "td": ["colspan", "rowspan"],
}

PAGE_CSS = """
@page { size: A4; margin: 20mm 18mm 24mm 18mm;
        @bottom-center { content: "%(footer)s - page " counter(page) " of " counter(pages);
                         font-size: 8pt; color: #777; } }
body { font-family: Arial, Helvetica, sans-serif; font-size: 11pt; line-height: 1.5; color: #222; }
h1.document-title { font-size: 18pt; margin-bottom: 16pt; }
.clause { margin-bottom: 12pt; }
table { border-collapse: collapse; width: 100%%; }
th, td { border: 1px solid #ccc; padding: 4pt 6pt; text-align: left; }
.two-col { display: flex; gap: 16pt; }
.col { flex: 1; border: 1px solid #eee; padding: 10pt; }
"""


def is_html(text: str) -> bool:
    return bool(text) and HTML_TAG.search(text) is not None


def clause_to_html(content: str) -> str:
    """Sanitise HTML clauses; escape plain-text ones and keep their line breaks."""
    if is_html(content):
        return bleach.clean(content, tags=ALLOWED_HTML_TAGS, attributes=ALLOWED_HTML_ATTRIBUTES, strip=True)
    return html.escape(content or "").replace("\n", "<br>")


class PDFRenderer:
    """Render documents to PDF bytes with WeasyPrint.

    Both render methods return b"" when rendering fails; callers must treat
    an empty result as a failure.
    """

    def __init__(self, company_name: str = "Company Name"):
        self.company_name = company_name

    def document_html(self, title: str, clauses: list[dict]) -> str:
        blocks = "\n".join(
            f'<div class="clause">{clause_to_html(str(clause.get("content") or ""))}</div>'
            for clause in clauses
        )
        return self._page(f'<h1 class="document-title">{html.escape(title or "")}</h1>\n{blocks}')

    def bilingual_html(self, title: str, english: str, translated: str, lang: str) -> str:
        """Two columns side by side: original English on the left, translation on the right."""
        body = (
            f"<h3>{html.escape(title or '')} - Bilingual</h3>"
            '<div class="two-col">'
            f'<div class="col"><h4>English (Original)</h4>{clause_to_html(english)}</div>'
            f'<div class="col"><h4>Translated ({html.escape(lang)})</h4>{clause_to_html(translated)}</div>'
            "</div>"
        )
        return self._page(body)

    async def render(self, document) -> bytes:
        """Render a Document (or any object with document_name and content_json)."""
        content_json = document.content_json or {}
        clauses = content_json.get("clauses") if isinstance(content_json, dict) else None
        if not clauses:
            clauses = [{"content": document.document_name}]
        return await self.render_from_html(self.document_html(document.document_name, clauses))

    async def render_from_html(self, page_html: str) -> bytes:
        try:
            return await asyncio.to_thread(self._write_pdf, page_html)
        except Exception as e:
            logger.error(f"PDF rendering failed: {e}", exc_info=True)
            return b""

    def _write_pdf(self, page_html: str) -> bytes:
        from weasyprint import HTML

        return HTML(string=page_html).write_pdf() or b""

    def _page(self, body: str) -> str:
        footer = self.company_name.replace("\\", "\\\\").replace('"', '\\"')
        css = PAGE_CSS % {"footer": footer}
        return f'<!DOCTYPE html>\n<html><head><meta charset="utf-8"><style>{css}</style></head>\n<body>{body}</body></html>'
