"""Composable WHERE predicates for document search.

Each builder returns None when its input is absent or blank, so callers can
pass every optional filter and let combine() drop the unused ones.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import ColumnElement, and_, func, or_

from docsearch.application.dtos.search import SearchQuery
from docsearch.infrastructure.persistence.models.document import Document
from docsearch.shared.utils import LIKE_ESCAPE_CHAR, contains_pattern, ensure_utc

Predicate = ColumnElement[bool]


class FacetDimension(str, Enum):
    """Dimensions that support facet counts. Value is the ORM attribute name."""

    CATEGORY = "category"
    STATUS = "status"
    AUTHOR = "author"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def has_text_search(query: str | None) -> Predicate | None:
    """Case-insensitive substring match on title OR author OR content."""
    term = _clean(query)
    if term is None:
        return None
    pattern = contains_pattern(term)
    # title and author are short columns; content last
    return or_(
        func.lower(Document.title).like(pattern, escape=LIKE_ESCAPE_CHAR),
        func.lower(Document.author).like(pattern, escape=LIKE_ESCAPE_CHAR),
        func.lower(Document.content).like(pattern, escape=LIKE_ESCAPE_CHAR),
    )


def has_category(category: str | None) -> Predicate | None:
    value = _clean(category)
    if value is None:
        return None
    return Document.category == value


def has_status(status: str | None) -> Predicate | None:
    value = _clean(status)
    if value is None:
        return None
    return Document.status == value


def has_author(author: str | None) -> Predicate | None:
    """Case-insensitive substring match on author."""
    value = _clean(author)
    if value is None:
        return None
    return func.lower(Document.author).like(
        contains_pattern(value), escape=LIKE_ESCAPE_CHAR
    )


def created_after(moment: datetime | None) -> Predicate | None:
    if moment is None:
        return None
    return Document.created_at >= ensure_utc(moment)


def created_before(moment: datetime | None) -> Predicate | None:
    if moment is None:
        return None
    return Document.created_at <= ensure_utc(moment)


def updated_after(moment: datetime | None) -> Predicate | None:
    if moment is None:
        return None
    return Document.updated_at >= ensure_utc(moment)


def updated_before(moment: datetime | None) -> Predicate | None:
    if moment is None:
        return None
    return Document.updated_at <= ensure_utc(moment)


def combine(*predicates: Predicate | None) -> Predicate | None:
    """AND all non-None predicates. Returns None when nothing is left (match all)."""
    active = [p for p in predicates if p is not None]
    if not active:
        return None
    if len(active) == 1:
        return active[0]
    return and_(*active)


def from_query(
    query: SearchQuery,
    *,
    exclude: FacetDimension | None = None,
    include_text: bool = True,
) -> Predicate | None:
    """Build the WHERE clause for a search query.

    Order: equality filters, date ranges, author substring, free text.
    Equality and range predicates are the most selective and index-backed;
    the OR'd substring search over three columns is composed last.

    Args:
        query: Search input.
        exclude: Facet dimension whose own filter is left out.
        include_text: False to skip the free-text predicate (engine already matched it).
    """
    return combine(
        None if exclude is FacetDimension.CATEGORY else has_category(query.category),
        None if exclude is FacetDimension.STATUS else has_status(query.status),
        created_after(query.created_after),
        created_before(query.created_before),
        updated_after(query.updated_after),
        updated_before(query.updated_before),
        None if exclude is FacetDimension.AUTHOR else has_author(query.author),
        has_text_search(query.query) if include_text else None,
    )
