"""
Unit tests for the search query builder.
"""

import pytest

from ftsmeili.mapping.query import build_search_query, highlight_attributes
from ftsmeili.models.document import DocumentAccess
from ftsmeili.models.search import SearchRequest
from ftsmeili.platform.exceptions import SearchQueryGenerationError


@pytest.fixture
def access():
    return DocumentAccess(viewer_id="alice")


@pytest.mark.parametrize(
    "page,size,offset,limit",
    [
        (1, 20, 0, 20),
        (3, 10, 20, 10),
        (1, 0, 0, 20),
        (2, -4, 20, 20),
        (0, 5, 0, 5),
        (-3, 5, 0, 5),
    ],
)
def test_pagination(access, page, size, offset, limit):
    query = build_search_query(SearchRequest(page=page, size=size), access, "files")

    assert query.params["offset"] == offset
    assert query.params["limit"] == limit


def test_query_text_and_filter(access):
    query = build_search_query(SearchRequest(search="budget 2024"), access, "files")

    assert query.query == "budget 2024"
    assert query.params["filter"].startswith("provider = 'files' AND ")


def test_highlighting_params(access):
    request = SearchRequest(parts=["comments", " body ", "", "comments", "   "])

    query = build_search_query(request, access, "files")

    assert query.params["attributesToHighlight"] == ["content", "title", "parts.comments", "parts.body"]
    assert query.params["highlightPreTag"] == ""
    assert query.params["highlightPostTag"] == ""


def test_highlight_attributes_are_unique():
    assert highlight_attributes(SearchRequest(parts=["a", "a"])) == ["content", "title", "parts.a"]


def test_missing_access_fails_closed():
    with pytest.raises(SearchQueryGenerationError):
        build_search_query(SearchRequest(), None, "files")
