import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

TypeLookup = Callable[[str, str], Awaitable[list[str]]]


async def resolve_unique_clause_type(desired_type: str, category: str, lookup: TypeLookup) -> str:
    """Return desired_type, or the first free "<desired_type>-N" in the category.

    lookup(prefix, category) returns every existing clause_type in the
    category starting with prefix. Suffixes are probed from 1 upwards and the
    first name not taken wins. Callers creating several clauses must resolve
    them one at a time so each resolution sees the previous inserts.
    """
    existing = set(await lookup(desired_type, category))
    if desired_type not in existing:
        return desired_type

    counter = 1
    while f"{desired_type}-{counter}" in existing:
        counter += 1

    resolved = f"{desired_type}-{counter}"
    logger.info(f"Clause type renamed: category={category!r} desired={desired_type!r} resolved={resolved!r}")
    return resolved
