LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "pt": "Portuguese",
    "zh": "Chinese (Simplified)",
    "hi": "Hindi",
    "ar": "Arabic",
    "ru": "Russian",
    "ta": "Tamil",
    "te": "Telugu",
    "kn": "Kannada",
    "ml": "Malayalam",
    "mr": "Marathi",
    "gu": "Gujarati",
    "bn": "Bengali",
    "pa": "Punjabi",
    "ja": "Japanese",
    "ko": "Korean",
    "ur": "Urdu",
}

HTML_TRANSLATION_SYSTEM = (
    "You translate HTML exactly. Preserve ALL tags and placeholders. Return only HTML."
)

HTML_TRANSLATION_USER = """\
You are a professional translation assistant specialized in legal and business documents.

Translate the following HTML content into {language}.

Rules:
1. Preserve ALL HTML tags and attributes exactly (<p>, <h1>, <table>, ...).
2. Translate ONLY the text between tags.
3. Do NOT modify bracketed placeholders like [Company Name].
4. Return clean HTML. No explanations, no markdown.

SOURCE HTML:
{text}"""

TEXT_TRANSLATION_SYSTEM = (
    "You translate text precisely. Preserve placeholders. Return only translated text."
)

TEXT_TRANSLATION_USER = """\
Translate the following text into {language}.

Rules:
- Preserve bracketed placeholders like [Company Name]
- Preserve formatting and line breaks
- No explanations, only the translation

SOURCE:
{text}"""


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code)
