"""
Meilisearch Platform - the facade the host drives.

This platform:
1. Loads the Meilisearch store from the stored configuration
2. Indexes documents, falling back to metadata-only indexing when the
   engine rejects a document
3. Deletes documents, runs searches and fetches single documents
4. Reports per-document outcomes to an optional Runner
"""

import json
from typing import Any, Callable, Dict, List, Optional

from ftsmeili.engine.index_service import IndexService
from ftsmeili.engine.runner import Runner, RunnerResult
from ftsmeili.engine.search_service import SearchService
from ftsmeili.models.document import DocumentAccess, ErrorSeverity, Index, IndexDocument, IndexStatus
from ftsmeili.models.search import SearchResult
from ftsmeili.platform.config_service import MEILISEARCH_API_KEY, MEILISEARCH_INDEX, ConfigService
from ftsmeili.platform.exceptions import ClientError, ConfigurationError, TransientTransportError
from ftsmeili.platform.logging import bind_engine_context, clear_engine_context, get_logger
from ftsmeili.storage.search.base import SearchStore
from ftsmeili.storage.search.meilisearch import MeiliSearchStore

logger = get_logger(__name__)

StoreFactory = Callable[[str, str], SearchStore]


class MeilisearchPlatform:
    def __init__(
        self,
        config_service: ConfigService,
        index_service: Optional[IndexService] = None,
        search_service: Optional[SearchService] = None,
        store_factory: Optional[StoreFactory] = None,
    ):
        self.config_service = config_service
        self.index_service = index_service or IndexService(config_service)
        self.search_service = search_service or SearchService(config_service)
        self._store_factory = store_factory or (lambda host, api_key: MeiliSearchStore(host=host, api_key=api_key))
        self.store: Optional[SearchStore] = None
        self.runner: Optional[Runner] = None

    def get_id(self) -> str:
        return "meilisearch"

    def get_name(self) -> str:
        return "Meilisearch"

    def get_configuration(self) -> Dict[str, str]:
        config = self.config_service.get_config()
        if config.get(MEILISEARCH_API_KEY):
            config[MEILISEARCH_API_KEY] = "********"
        return config

    def set_runner(self, runner: Optional[Runner]) -> None:
        self.runner = runner

    async def load_platform(self) -> None:
        """
        Create the store from the current configuration, replacing any
        previously loaded one.

        Raises:
            ConfigurationError: host is not configured.
        """
        host = self.config_service.get_host()
        api_key = self.config_service.get_api_key()

        await self.close()
        self.store = self._store_factory(host, api_key)
        await self.store.connect()
        # The index may still be unset here; it is only required when used.
        bind_engine_context(host, self.config_service.get_config()[MEILISEARCH_INDEX].strip())
        logger.info("platform_loaded", host=host)

    async def close(self) -> None:
        if self.store:
            await self.store.close()
            self.store = None
            clear_engine_context()

    async def test_platform(self) -> bool:
        try:
            return await self._get_store().health_check()
        except Exception as e:
            logger.warning("platform_test_failed", error=str(e))
            return False

    async def initialize_index(self) -> None:
        await self.index_service.initialize_index(self._get_store())

    async def reset_index(self, provider_id: str) -> None:
        if provider_id == "all":
            await self.index_service.reset_index_all(self._get_store())
        else:
            await self.index_service.reset_index(self._get_store(), provider_id)

    async def index_document(self, document: IndexDocument) -> Index:
        """
        Index a document and return its updated index state.

        If Meilisearch rejects the document it is indexed again without
        content (warning). Only if that also fails is the document marked
        failed. Transport failures and missing configuration propagate.
        """
        store = self._get_store()
        document.init_hash()

        try:
            result = await self.index_service.index_document(store, document)
            index = self.index_service.parse_index_result(document.index, result)
            self._update_new_index_result(index, self._encode_json(result), "ok", RunnerResult.SUCCESS)
            return index
        except (TransientTransportError, ConfigurationError):
            raise
        except Exception as e:
            logger.warning(
                "index_document_failed",
                provider_id=document.provider_id,
                document_id=document.document_id,
                error=str(e),
            )
            self._manage_index_error(document, e)

        try:
            result = await self._index_document_without_content(store, document)
            index = self.index_service.parse_index_result(document.index, result)
            self._update_new_index_result(index, self._encode_json(result), "ok", RunnerResult.WARNING)
            return index
        except (TransientTransportError, ConfigurationError):
            raise
        except Exception as e:
            logger.error(
                "index_document_without_content_failed",
                provider_id=document.provider_id,
                document_id=document.document_id,
                error=str(e),
            )
            document.index.set_status(IndexStatus.FAILED)
            self._update_new_index_result(document.index, "", "fail", RunnerResult.FAIL)
            self._manage_index_error(document, e)

        return document.index

    async def _index_document_without_content(self, store: SearchStore, document: IndexDocument) -> Dict[str, Any]:
        self._update_runner_action("indexDocumentWithoutContent", True)
        stripped = document.model_copy(update={"content": ""})
        return await self.index_service.index_document(store, stripped)

    def _manage_index_error(self, document: IndexDocument, e: Exception) -> None:
        message = str(e)
        exception = type(e).__name__
        document.index.add_error(message, exception, ErrorSeverity.SEV_3)
        self._update_new_index_error(document.index, message, exception, ErrorSeverity.SEV_3)

    async def delete_indexes(self, indexes: List[Index]) -> None:
        """Best-effort removal; a failed deletion is reported as a warning."""
        store = self._get_store()
        for index in indexes:
            try:
                await self.index_service.index_document_remove(store, index.provider_id, index.document_id)
                self._update_new_index_result(index, "index deleted", "success", RunnerResult.SUCCESS)
            except Exception as e:
                logger.warning(
                    "delete_index_failed",
                    provider_id=index.provider_id,
                    document_id=index.document_id,
                    error=str(e),
                )
                self._update_new_index_result(
                    index, "index not deleted", "issue while deleting index", RunnerResult.WARNING
                )

    async def search_request(self, result: SearchResult, access: DocumentAccess | None) -> None:
        await self.search_service.search_request(self._get_store(), result, access)

    async def get_document(self, provider_id: str, document_id: str) -> IndexDocument:
        return await self.search_service.get_document(self._get_store(), provider_id, document_id)

    def _update_runner_action(self, action: str, force: bool = False) -> None:
        if self.runner is None:
            return
        self.runner.update_action(action, force)

    def _update_new_index_error(self, index: Index, message: str, exception: str, severity: ErrorSeverity) -> None:
        if self.runner is None:
            return
        self.runner.new_index_error(index, message, exception, severity)

    def _update_new_index_result(self, index: Index, message: str, status: str, result_type: RunnerResult) -> None:
        if self.runner is None:
            return
        self.runner.new_index_result(index, message, status, result_type)

    @staticmethod
    def _encode_json(data: Dict[str, Any]) -> str:
        try:
            return json.dumps(data, default=str)
        except (TypeError, ValueError):
            return "{}"

    def _get_store(self) -> SearchStore:
        if self.store is None:
            raise ClientError("platform not loaded")
        return self.store
