CLAUSE_GENERATION_SYSTEM = """You are a professional document generator. \
Generate structured, professional document clauses in JSON format with HTML content.

Rules:
- Return valid JSON only. No explanation, no markdown, no code blocks.
- Each clause "content" field must be valid HTML built from semantic tags: \
<h1>, <h2>, <p>, <ul>, <ol>, <table>, <strong>, <em>.
- Tables use a full <table><thead><tbody> structure.
- Keep placeholders like [Company Name] inside the HTML exactly as written."""

CLAUSE_GENERATION_USER = """\
Generate all necessary clauses for a {document_type} document.{context_block}

Use placeholders like [Company Name] or [Employee Name] wherever a value is \
specific to one recipient.

Return JSON in this exact format:
{{"clauses": [{{"clause_type": "header", "content": "<h1>[Company Name]</h1><p>[Company Address]</p>", \
"category": "{document_type}"}}]}}

{suggestions}"""

CLAUSE_SUGGESTIONS = {
    "offer_letter": """Generate these clauses:
1. header - company details with <h1> and <p>
2. greeting - "Dear [Candidate Name],"
3. opening - introduction paragraph
4. position_details - job title and department with <h2> and <p>
5. compensation - a complete <table> with Component and Amount columns, e.g. [Salary], [Bonus]
6. benefits - a <ul> list
7. start_date - <p> with <strong>
8. probation_period - if applicable
9. terms - <ol> or <p>
10. closing - professional closing
11. signature - signature block""",
    "nda": """Generate these clauses:
1. header - <h1>
2. parties - <p> or <ul>
3. definitions - <h2> and a definition list
4. confidential_information - <p> with <strong>
5. obligations - <ol> for numbered items
6. exclusions - <ul>
7. term - <p>
8. remedies - <p> or <ul>
9. signature - signature blocks""",
    "employment_contract": """Generate a comprehensive contract:
- <h1> for the main title
- <h2> for major sections
- <table> for the compensation breakdown
- <ol> for terms and conditions
- <p> for paragraphs""",
    "invoice": """Generate these clauses:
1. header - company info
2. invoice_details - invoice number, date
3. bill_to - customer information
4. items_table - a complete <table>
5. totals - a <table> for subtotal, tax and total""",
}

DEFAULT_SUGGESTIONS = """Use proper HTML structure:
- <h1> for the title, <h2> for sections
- <table> for tabular data
- <ul>/<ol> for lists, <p> for paragraphs"""

SINGLE_CLAUSE_SYSTEM = "Return valid JSON only. No explanation, no markdown."

SINGLE_CLAUSE_USER = """\
Generate ONE professional clause with HTML content.
Type: {clause_type}
Category: {category}{context_block}

Return JSON in this exact format:
{{"clause": {{"clause_type": "{clause_type}", "content": "<valid HTML here>"}}}}"""
