"""Relational search repository: filtered, sorted, paginated queries over documents.

Also computes facet counts and prefix autocomplete. Uses SQLAlchemy Core
expressions so the same queries run on PostgreSQL and SQLite.
"""

from __future__ import annotations

import logging

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docsearch.application.dtos.search import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Facets,
    FacetValue,
    SearchQuery,
    SearchResultPage,
)
from docsearch.domain.enums import AutocompleteField, SortField, SortOrder
from docsearch.domain.exceptions import InvalidArgumentError, InvalidFieldError
from docsearch.infrastructure.persistence.models.document import Document
from docsearch.infrastructure.persistence.repositories.document_filters import (
    FacetDimension,
    Predicate,
    from_query,
)
from docsearch.infrastructure.persistence.repositories.document_repo import (
    document_to_result,
)
from docsearch.shared.utils import LIKE_ESCAPE_CHAR, prefix_pattern

logger = logging.getLogger(__name__)

MIN_PREFIX_LENGTH = 2
DEFAULT_AUTOCOMPLETE_LIMIT = 10


def parse_autocomplete_field(field: AutocompleteField | str) -> AutocompleteField:
    """Return the autocomplete field for field (case-insensitive). Raises InvalidFieldError."""
    if isinstance(field, AutocompleteField):
        return field
    try:
        return AutocompleteField((field or "").strip().lower())
    except ValueError:
        raise InvalidFieldError(field) from None


def validate_prefix(prefix: str | None, min_length: int = MIN_PREFIX_LENGTH) -> str:
    """Return the trimmed prefix. Raises InvalidArgumentError when shorter than min_length."""
    if prefix is None or len(prefix.strip()) < min_length:
        raise InvalidArgumentError(
            f"Prefix must be at least {min_length} characters", field="prefix"
        )
    return prefix.strip()


def autocomplete_limit(limit: int | None, default: int = DEFAULT_AUTOCOMPLETE_LIMIT) -> int:
    """Row limit for one field: missing or non-positive becomes default.

    The user-facing maximum is enforced by the orchestrator, which asks for
    twice that many titles in the ALL mode.
    """
    if limit is None or limit <= 0:
        return default
    return limit


class SearchRepository:
    """Relational search engine over the documents table."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
        min_prefix_length: int = MIN_PREFIX_LENGTH,
    ) -> None:
        self.db = db
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.min_prefix_length = min_prefix_length

    async def search(self, query: SearchQuery) -> SearchResultPage:
        """Filtered, sorted, paginated search.

        Total count comes from a second COUNT query sharing the same predicate
        set (no ORDER BY). Facets are attached when query.include_facets is set.
        """
        page = query.normalized_page()
        size = query.normalized_size(self.default_page_size, self.max_page_size)
        where = from_query(query)
        logger.debug(
            "Relational search: query=%r category=%r status=%r author=%r page=%d size=%d",
            query.query,
            query.category,
            query.status,
            query.author,
            page,
            size,
        )

        stmt = self._apply_sort(_where(select(Document), where), query)
        stmt = stmt.offset(page * size).limit(size)
        result = await self.db.execute(stmt)
        content = [document_to_result(row) for row in result.scalars().all()]

        total = await self._count(where)
        facets = await self.facets(query) if query.include_facets else None
        return SearchResultPage.build(content, total, page, size, facets)

    async def search_ids(self, query: SearchQuery) -> list[str]:
        """Ids of every matching document in sort order (no pagination)."""
        stmt = self._apply_sort(_where(select(Document.id), from_query(query)), query)
        result = await self.db.execute(stmt)
        return [row[0] for row in result.all()]

    async def filter_ids(self, query: SearchQuery, document_ids: list[str]) -> set[str]:
        """Subset of document_ids satisfying the structured filters (free text excluded)."""
        if not document_ids:
            return set()
        where = from_query(query, include_text=False)
        stmt = _where(select(Document.id).where(Document.id.in_(document_ids)), where)
        result = await self.db.execute(stmt)
        return {row[0] for row in result.all()}

    async def count(self, query: SearchQuery) -> int:
        """Number of documents matching the query's full predicate set."""
        return await self._count(from_query(query))

    async def facets(self, query: SearchQuery) -> Facets:
        """Category, status and author counts.

        Each dimension applies every other active filter but not its own, so
        alternative values for that dimension stay discoverable.
        """
        return Facets(
            categories=await self._facet(query, FacetDimension.CATEGORY),
            statuses=await self._facet(query, FacetDimension.STATUS),
            authors=await self._facet(query, FacetDimension.AUTHOR),
        )

    async def autocomplete(
        self,
        field: AutocompleteField | str,
        prefix: str,
        limit: int | None = DEFAULT_AUTOCOMPLETE_LIMIT,
    ) -> list[str]:
        """Distinct values of field starting with prefix (case-insensitive), ascending.

        Raises:
            InvalidFieldError: field is not title, author or category.
            InvalidArgumentError: prefix shorter than the minimum length.
        """
        column = getattr(Document, parse_autocomplete_field(field).value)
        term = validate_prefix(prefix, self.min_prefix_length)
        stmt = (
            select(column)
            .distinct()
            .where(
                column.is_not(None),
                func.lower(column).like(prefix_pattern(term), escape=LIKE_ESCAPE_CHAR),
            )
            .order_by(column.asc())
            .limit(autocomplete_limit(limit))
        )
        result = await self.db.execute(stmt)
        return [row[0] for row in result.all()]

    async def _count(self, where: Predicate | None) -> int:
        stmt = _where(select(func.count(Document.id)), where)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def _facet(self, query: SearchQuery, dimension: FacetDimension) -> list[FacetValue]:
        column = getattr(Document, dimension.value)
        stmt = _where(
            select(column, func.count(Document.id)),
            from_query(query, exclude=dimension),
        )
        stmt = (
            stmt.where(column.is_not(None), column != "")
            .group_by(column)
            .order_by(column.asc())
        )
        result = await self.db.execute(stmt)
        return [
            FacetValue(value=value, count=int(count), label=value)
            for value, count in result.all()
        ]

    def _apply_sort(self, stmt: Select, query: SearchQuery) -> Select:
        """ORDER BY the whitelisted sort field; unknown or blank falls back to created_at DESC."""
        field = SortField.parse(query.sort_by)
        if field is None:
            if query.sort_by and query.sort_by.strip():
                logger.warning("Invalid sort field: %s, using default", query.sort_by)
            column, descending = Document.created_at, True
        else:
            column = getattr(Document, field.value)
            descending = (query.sort_order or "").strip().upper() == SortOrder.DESC.value
        order = column.desc() if descending else column.asc()
        # id tiebreak keeps paging stable across equal sort keys
        return stmt.order_by(order, Document.id.asc())


def _where(stmt: Select, predicate: Predicate | None) -> Select:
    return stmt if predicate is None else stmt.where(predicate)
