"""
Tests for clause HTML preparation and the PDF renderer's failure contract.
"""

from types import SimpleNamespace

import pytest

from app.services.pdf_service import PDFRenderer, clause_to_html, is_html
from conftest import FakePDFRenderer


class TestClauseHtml:
    def test_detects_html(self):
        assert is_html("<p>Hello</p>")
        assert not is_html("Salary < 5 and > 2")
        assert not is_html("")

    def test_scripts_are_stripped(self):
        cleaned = clause_to_html('<p onclick="x()">Hi</p><script>alert(1)</script>')
        assert "<script>" not in cleaned
        assert "onclick" not in cleaned
        assert "<p>Hi</p>" in cleaned

    def test_tables_survive(self):
        cleaned = clause_to_html("<table><tr><td colspan=\"2\">[Salary]</td></tr></table>")
        assert '<td colspan="2">[Salary]</td>' in cleaned

    def test_plain_text_is_escaped_with_line_breaks(self):
        assert clause_to_html("A & B\nC") == "A &amp; B<br>C"


class TestRenderer:
    def test_page_carries_title_and_footer(self):
        page = PDFRenderer(company_name='Acme "Legal"').document_html("Offer <Alice>", [{"content": "Hi"}])
        assert "Offer &lt;Alice&gt;" in page
        assert 'Acme \\"Legal\\" - page' in page
        assert "width: 100%;" in page

    def test_bilingual_columns_keep_markup(self):
        page = PDFRenderer().bilingual_html(
            "Offer", "<p>Hello <strong>Alice</strong></p><script>x()</script>", "Bonjour & bienvenue", "fr"
        )
        assert "<p>Hello <strong>Alice</strong></p>" in page
        assert "&lt;p&gt;" not in page
        assert "<script>" not in page
        assert "Bonjour &amp; bienvenue" in page
        assert "Translated (fr)" in page

    @pytest.mark.asyncio
    async def test_document_without_clauses_renders_its_name(self):
        renderer = FakePDFRenderer()
        document = SimpleNamespace(document_name="Untitled NDA", content_json={"clauses": []})

        pdf = await renderer.render(document)

        assert pdf.count(b"Untitled NDA") == 2

    @pytest.mark.asyncio
    async def test_failure_returns_empty_bytes(self):
        renderer = FakePDFRenderer(fail_when="boom")
        assert await renderer.render_from_html("<p>boom</p>") == b""
