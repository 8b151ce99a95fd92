"""
Search request and result models.
"""

import json
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from ftsmeili.models.document import IndexDocument


class CompareType(str, Enum):
    """Comparison applied by a simple query."""

    TEXT = "text"
    KEYWORD = "keyword"
    ARRAY = "array"
    INT_EQ = "int_eq"
    INT_GTE = "int_gte"
    INT_LTE = "int_lte"
    INT_GT = "int_gt"
    INT_LT = "int_lt"
    BOOL = "bool"
    REGEX = "regex"
    WILDCARD = "wildcard"


class SimpleQuery(BaseModel):
    field: str
    type: CompareType
    values: List[Any] = Field(default_factory=list)


class SearchRequest(BaseModel):
    search: str = ""
    page: int = 1
    size: int = 20
    meta_tags: List[str] = Field(default_factory=list)
    sub_tags: List[str] = Field(default_factory=list)
    simple_queries: List[SimpleQuery] = Field(default_factory=list)
    options: Dict[str, Any] = Field(default_factory=dict)
    parts: List[str] = Field(default_factory=list)

    def get_option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)


class SearchResult(BaseModel):
    """Filled by the search service for a single provider."""

    request: SearchRequest
    provider_id: str
    documents: List[IndexDocument] = Field(default_factory=list)
    total: int = 0
    max_score: int = 0
    time: int = 0
    timed_out: bool = False
    raw_result: str = ""

    def add_document(self, document: IndexDocument) -> None:
        self.documents.append(document)

    def set_raw_result(self, raw: Dict[str, Any]) -> None:
        try:
            self.raw_result = json.dumps(raw, default=str)
        except (TypeError, ValueError):
            self.raw_result = "{}"
