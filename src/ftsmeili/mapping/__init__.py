"""
Translation layer between the host document model and Meilisearch.

Functions here never talk to the engine and keep no state.
"""

from .identity import decode_document_id, document_id_candidates, encode_document_id
from .index_body import generate_document, generate_index_body
from .filters import build_filter_expression, escape_filter_value
from .query import SearchQuery, build_search_query
from .results import SearchResponse, map_get_document, map_hit, map_search_response

__all__ = [
    "decode_document_id",
    "document_id_candidates",
    "encode_document_id",
    "generate_document",
    "generate_index_body",
    "build_filter_expression",
    "escape_filter_value",
    "SearchQuery",
    "build_search_query",
    "SearchResponse",
    "map_get_document",
    "map_hit",
    "map_search_response",
]
