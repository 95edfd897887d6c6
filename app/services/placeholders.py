"""Placeholder handling for clause content.

Placeholders are bracketed tokens such as ``[Employee Name]``. Everything in
this module is pure: no I/O and no database access.
"""
import re
from typing import Iterable, Mapping

PLACEHOLDER_PATTERN = re.compile(r"\[([^\]]+)\]")

# Semantic identifier keys, most specific first, compared after normalize_key()
IDENTIFIER_KEYS = (
    "employee_name",
    "employee",
    "full_name",
    "candidate_name",
    "candidate",
    "recipient_name",
    "recipient",
    "party_name",
    "vendor_name",
    "vendor",
    "customer_name",
    "customer",
    "name",
)


def _content_of(item) -> str:
    if isinstance(item, Mapping):
        return item.get("content") or ""
    return getattr(item, "content", None) or ""


def extract_placeholders_ordered(items: Iterable) -> list[str]:
    """Unique trimmed placeholder names across all items, in first-seen order."""
    seen: dict[str, None] = {}
    for item in items:
        for match in PLACEHOLDER_PATTERN.finditer(_content_of(item)):
            name = match.group(1).strip()
            if name:
                seen.setdefault(name, None)
    return list(seen)


def extract_placeholders(items: Iterable) -> set[str]:
    """Set of unique trimmed placeholder names found in each item's content.

    Items may be mappings with a "content" key or objects with a .content
    attribute (ORM clauses).
    """
    return set(extract_placeholders_ordered(items))


def substitute(content: str, values: Mapping[str, object]) -> str:
    """Replace every ``[Name]`` whose name has a non-empty value in values.

    Names are matched literally (regex metacharacters escaped) and the
    replacement is a single pass, so a substituted value is never scanned
    again. A placeholder with a missing, None or empty value stays in its
    bracket form.
    """
    if not content:
        return content or ""

    names = [name for name, value in values.items() if name and value is not None and str(value) != ""]
    if not names:
        return content

    # Longest first so "[A B]" wins over a shorter alternative at the same position
    names.sort(key=len, reverse=True)
    pattern = re.compile(r"\[(" + "|".join(re.escape(name) for name in names) + r")\]")
    return pattern.sub(lambda match: str(values[match.group(1)]), content)


def normalize_key(raw) -> str:
    """Lowercase, collapse non-alphanumeric runs to "_" and trim underscores.

    "Employee Name", "employee_name" and " EMPLOYEE-name " all normalize to
    "employee_name".
    """
    key = ("" if raw is None else str(raw)).strip().lower()
    key = re.sub(r"[^a-z0-9]+", "_", key)
    return key.strip("_")


def normalized_view(context: Mapping[str, object]) -> dict[str, object]:
    """Map normalized key -> value; on collisions the first non-empty value wins."""
    view: dict[str, object] = {}
    for key, value in context.items():
        normalized = normalize_key(key)
        if not normalized:
            continue
        if _is_blank(view.get(normalized)):
            view[normalized] = value
    return view


def derive_primary_identifier(context: Mapping[str, object]) -> str | None:
    """Pick the value that best names the person or party a row is about."""
    view = normalized_view(context)
    for key in IDENTIFIER_KEYS:
        if not _is_blank(view.get(key)):
            return str(view[key]).strip()

    for value in context.values():
        if not _is_blank(value):
            return str(value).strip()
    return None


def clean_for_filename(value) -> str:
    return re.sub(r"[^A-Za-z0-9]", "", "" if value is None else str(value))


def template_base_name(template_name: str) -> str:
    """Template display name as a filename stem: "offer letter v2" becomes "Offerletterv2"."""
    cleaned = clean_for_filename(template_name)
    return cleaned[:1].upper() + cleaned[1:]


def _is_blank(value) -> bool:
    return value is None or str(value).strip() == ""
