"""
Index Service - writes documents to, and removes them from, the Meilisearch index.
"""

from typing import Any, Dict

from ftsmeili.mapping.filters import FILTERABLE_FIELDS, quote
from ftsmeili.mapping.identity import document_id_candidates
from ftsmeili.mapping.index_body import generate_document
from ftsmeili.models.document import ErrorSeverity, Index, IndexDocument, IndexStatus
from ftsmeili.platform.config import Settings, settings as default_settings
from ftsmeili.platform.config_service import ConfigService
from ftsmeili.platform.exceptions import IndexingError, SearchEngineApiError
from ftsmeili.platform.logging import get_logger
from ftsmeili.storage.search.base import SearchStore

logger = get_logger(__name__)

SEARCHABLE_ATTRIBUTES = ["title", "content"]
SORTABLE_ATTRIBUTES = ["lastModified"]
DISPLAYED_ATTRIBUTES = ["*"]


class IndexService:
    def __init__(self, config_service: ConfigService, settings: Settings | None = None):
        self.config_service = config_service
        self.settings = settings or default_settings

    async def initialize_index(self, store: SearchStore) -> None:
        index_name = self.config_service.get_index_name()
        await store.create_index(index_name, primary_key="id")
        await self.configure_index_settings(store)
        logger.info("index_initialized", index=index_name)

    async def configure_index_settings(self, store: SearchStore) -> None:
        index_name = self.config_service.get_index_name()
        await store.update_filterable_attributes(index_name, list(FILTERABLE_FIELDS))
        await store.update_searchable_attributes(index_name, SEARCHABLE_ATTRIBUTES)
        await store.update_sortable_attributes(index_name, SORTABLE_ATTRIBUTES)
        await store.update_displayed_attributes(index_name, DISPLAYED_ATTRIBUTES)

    async def reset_index(self, store: SearchStore, provider_id: str) -> None:
        """Remove every document of one provider."""
        index_name = self.config_service.get_index_name()
        await store.delete_documents_by_filter(index_name, f"provider = {quote(provider_id)}")
        logger.info("index_reset", index=index_name, provider_id=provider_id)

    async def reset_index_all(self, store: SearchStore) -> None:
        index_name = self.config_service.get_index_name()
        await store.delete_index(index_name)
        logger.info("index_reset_all", index=index_name)

    async def index_document(self, store: SearchStore, document: IndexDocument) -> Dict[str, Any]:
        """
        Write (or remove) a document according to its index status.

        REMOVE deletes it; OK without CONTENT/META is a partial update;
        anything else is a full (re)index.
        """
        index = document.index
        if index.is_status(IndexStatus.REMOVE):
            await self.index_document_remove(store, document.provider_id, document.document_id)
            return {}

        if (
            index.is_status(IndexStatus.OK)
            and not index.is_status(IndexStatus.CONTENT)
            and not index.is_status(IndexStatus.META)
        ):
            return await self.index_document_update(store, document)

        return await self.index_document_new(store, document)

    async def index_document_new(self, store: SearchStore, document: IndexDocument) -> Dict[str, Any]:
        index_name = self.config_service.get_index_name()
        task = await store.add_documents(index_name, [generate_document(document)])
        return await self._await_task(store, document, task)

    async def index_document_update(self, store: SearchStore, document: IndexDocument) -> Dict[str, Any]:
        index_name = self.config_service.get_index_name()
        task = await store.update_documents(index_name, [generate_document(document)])
        return await self._await_task(store, document, task)

    async def index_document_remove(self, store: SearchStore, provider_id: str, document_id: str) -> None:
        """
        Delete a document under both its current and its legacy identifier.
        Missing documents and engine rejections are ignored.
        """
        index_name = self.config_service.get_index_name()
        for doc_id in document_id_candidates(provider_id, document_id):
            try:
                await store.delete_document(index_name, doc_id)
            except SearchEngineApiError as e:
                logger.debug("delete_candidate_ignored", doc_id=doc_id, code=e.code, error=e.message)

    async def _await_task(self, store: SearchStore, document: IndexDocument, task: Dict[str, Any]) -> Dict[str, Any]:
        if not self.settings.MEILISEARCH_WAIT_FOR_TASKS or "taskUid" not in task:
            return task

        task = await store.wait_for_task(
            task["taskUid"],
            timeout_ms=self.settings.MEILISEARCH_TASK_TIMEOUT_MS,
            interval_ms=self.settings.MEILISEARCH_TASK_POLL_INTERVAL_MS,
        )
        if task.get("status") == "failed":
            error = task.get("error") or {}
            raise IndexingError(
                document.document_id,
                error.get("message", "indexing task failed"),
                details={"task_uid": task.get("uid"), "code": error.get("code", "")},
            )
        return task

    def parse_index_result(self, index: Index, result: Dict[str, Any]) -> Index:
        index.set_last_index()

        if result.get("status") == "failed":
            error = result.get("error") or {}
            index.set_status(IndexStatus.FAILED)
            index.add_error(error.get("message", "indexing task failed"), error.get("code", ""), ErrorSeverity.SEV_3)
            return index

        index.set_status(IndexStatus.DONE, reset=True)
        return index
