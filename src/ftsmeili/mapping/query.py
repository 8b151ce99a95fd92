"""
Search query builder.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ftsmeili.mapping.filters import build_filter_expression
from ftsmeili.models.document import DocumentAccess
from ftsmeili.models.search import SearchRequest
from ftsmeili.platform.exceptions import SearchQueryGenerationError

DEFAULT_PAGE_SIZE = 20


@dataclass
class SearchQuery:
    query: str
    params: Dict[str, Any] = field(default_factory=dict)


def build_search_query(
    request: SearchRequest,
    access: Optional[DocumentAccess],
    provider_id: str,
) -> SearchQuery:
    """
    Assemble the text query and Meilisearch search parameters.

    Raises:
        SearchQueryGenerationError: no access record was given, or the
            request could not be compiled. Callers skip the search.
    """
    if access is None:
        raise SearchQueryGenerationError("no access record for the viewer")

    page = max(1, request.page)
    size = request.size if request.size > 0 else DEFAULT_PAGE_SIZE

    try:
        filter_expression = build_filter_expression(request, access, provider_id)
    except (TypeError, ValueError) as e:
        raise SearchQueryGenerationError(str(e)) from e

    params = {
        "filter": filter_expression,
        "limit": size,
        "offset": (page - 1) * size,
        "attributesToHighlight": highlight_attributes(request),
        # Excerpt sources come from field names, not markup.
        "highlightPreTag": "",
        "highlightPostTag": "",
        "showMatchesPosition": True,
    }

    return SearchQuery(query=request.search, params=params)


def highlight_attributes(request: SearchRequest) -> List[str]:
    attributes = ["content", "title"]
    for part in request.parts:
        part = str(part).strip()
        if part:
            attributes.append(f"parts.{part}")
    return list(dict.fromkeys(attributes))
