"""
Tests for clause_type collision resolution within a category.
"""

import pytest

from app.services.clause_naming import resolve_unique_clause_type


def lookup_from(existing: dict[str, list[str]]):
    async def lookup(prefix: str, category: str) -> list[str]:
        return [name for name in existing.get(category, []) if name.startswith(prefix)]

    return lookup


@pytest.mark.asyncio
async def test_collision_takes_next_free_suffix():
    lookup = lookup_from({"nda": ["header", "header-1"]})
    assert await resolve_unique_clause_type("header", "nda", lookup) == "header-2"


@pytest.mark.asyncio
async def test_no_collision_is_unchanged():
    lookup = lookup_from({"nda": ["header", "header-1"]})
    assert await resolve_unique_clause_type("greeting", "nda", lookup) == "greeting"


@pytest.mark.asyncio
async def test_other_categories_do_not_collide():
    lookup = lookup_from({"nda": ["header"]})
    assert await resolve_unique_clause_type("header", "offer_letter", lookup) == "header"


@pytest.mark.asyncio
async def test_prefix_matches_that_are_not_suffixes_are_ignored():
    lookup = lookup_from({"nda": ["header", "headers", "header-x"]})
    assert await resolve_unique_clause_type("header", "nda", lookup) == "header-1"


@pytest.mark.asyncio
async def test_first_gap_is_filled():
    lookup = lookup_from({"nda": ["header", "header-2", "header-3"]})
    assert await resolve_unique_clause_type("header", "nda", lookup) == "header-1"
