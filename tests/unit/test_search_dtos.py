"""SearchQuery normalization and SearchResultPage counters."""

from datetime import datetime, timezone

import pytest

from docsearch.application.dtos.search import SearchQuery, SearchResultPage
from docsearch.domain.enums import SortField


class TestSearchQuery:
    def test_blank_text_is_none(self) -> None:
        assert SearchQuery(query="  ").text is None
        assert SearchQuery(query=" java ").text == "java"

    def test_has_filters(self) -> None:
        assert not SearchQuery(query="java").has_filters()
        assert not SearchQuery(category=" ").has_filters()
        assert SearchQuery(status="draft").has_filters()
        assert SearchQuery(
            created_after=datetime(2025, 1, 1, tzinfo=timezone.utc)
        ).has_filters()

    @pytest.mark.parametrize(("page", "expected"), [(None, 0), (-3, 0), (4, 4)])
    def test_normalized_page(self, page, expected) -> None:
        assert SearchQuery(page=page).normalized_page() == expected

    @pytest.mark.parametrize(("size", "expected"), [(None, 20), (0, 20), (-1, 20), (5, 5), (500, 100)])
    def test_normalized_size(self, size, expected) -> None:
        assert SearchQuery(size=size).normalized_size() == expected


class TestSearchResultPage:
    def test_first_of_three_pages(self) -> None:
        page = SearchResultPage.build([], 12, 0, 5)
        assert page.total_pages == 3
        assert page.has_next is True
        assert page.has_previous is False

    def test_last_page(self) -> None:
        page = SearchResultPage.build([], 12, 2, 5)
        assert page.has_next is False
        assert page.has_previous is True

    def test_empty_result(self) -> None:
        page = SearchResultPage.build([], 0, 0, 20)
        assert page.total_pages == 0
        assert page.has_next is False


class TestSortField:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("createdAt", SortField.CREATED_AT),
            ("updated_at", SortField.UPDATED_AT),
            ("TITLE", SortField.TITLE),
            ("content", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, raw, expected) -> None:
        assert SortField.parse(raw) is expected
