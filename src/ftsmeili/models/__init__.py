from .document import (
    ContentEncoding,
    DocumentAccess,
    ErrorSeverity,
    Excerpt,
    Index,
    IndexDocument,
    IndexErrorEntry,
    IndexStatus,
)
from .search import CompareType, SearchRequest, SearchResult, SimpleQuery

__all__ = [
    "ContentEncoding",
    "DocumentAccess",
    "ErrorSeverity",
    "Excerpt",
    "Index",
    "IndexDocument",
    "IndexErrorEntry",
    "IndexStatus",
    "CompareType",
    "SearchRequest",
    "SearchResult",
    "SimpleQuery",
]
