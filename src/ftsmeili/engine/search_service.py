"""
Search Service - runs search requests and document lookups against Meilisearch.
"""

from ftsmeili.mapping.identity import document_id_candidates
from ftsmeili.mapping.query import build_search_query
from ftsmeili.mapping.results import map_get_document, map_hit, map_search_response
from ftsmeili.models.document import DocumentAccess, IndexDocument
from ftsmeili.models.search import SearchResult
from ftsmeili.platform.config_service import ConfigService
from ftsmeili.platform.exceptions import DocumentNotFoundError, SearchQueryGenerationError
from ftsmeili.platform.logging import get_logger
from ftsmeili.storage.search.base import SearchStore

logger = get_logger(__name__)


class SearchService:
    def __init__(self, config_service: ConfigService):
        self.config_service = config_service

    async def search_request(self, store: SearchStore, result: SearchResult, access: DocumentAccess | None) -> None:
        """
        Fill `result` with the documents matching its request.

        If the query cannot be built the engine is not called and `result`
        stays empty.
        """
        logger.debug("search_request", provider_id=result.provider_id, request=result.request.model_dump())
        try:
            query = build_search_query(result.request, access, result.provider_id)
        except SearchQueryGenerationError as e:
            logger.warning("search_query_generation_failed", provider_id=result.provider_id, error=e.message)
            return

        index_name = self.config_service.get_index_name()
        try:
            logger.debug("searching_meilisearch", index=index_name, params=query.params)
            raw = await store.search(index_name, query.query, query.params)
        except Exception as e:
            logger.debug(
                "search_failed",
                error=str(e),
                request=result.request.model_dump(),
                query=query.query,
                params=query.params,
            )
            raise

        logger.debug("search_raw_result", result=raw)
        response = map_search_response(raw)

        result.set_raw_result(raw)
        result.total = response.total
        result.max_score = 0
        result.time = response.processing_time_ms
        result.timed_out = False

        for hit in response.hits:
            result.add_document(map_hit(hit, access.viewer_id))

        logger.debug("search_result", provider_id=result.provider_id, total=result.total, count=len(result.documents))

    async def get_document(self, store: SearchStore, provider_id: str, document_id: str) -> IndexDocument:
        """
        Fetch a stored document, trying its current identifier first and its
        legacy one second.

        Raises:
            DocumentNotFoundError: neither identifier exists in the index.
        """
        index_name = self.config_service.get_index_name()
        for doc_id in document_id_candidates(provider_id, document_id):
            raw = await store.get_document(index_name, doc_id)
            if raw is not None:
                return map_get_document(raw, provider_id, document_id)

        raise DocumentNotFoundError(provider_id, document_id)
