import asyncio
from typing import List, Dict, Any, Optional

import structlog
import httpx

from ftsmeili.platform.config import settings
from ftsmeili.platform.exceptions import SearchEngineApiError, TransientTransportError
from ftsmeili.storage.search.base import SearchStore

logger = structlog.get_logger()

FINISHED_TASK_STATUSES = ("succeeded", "failed", "canceled")


class MeiliSearchStore(SearchStore):
    """Meilisearch implementation of SearchStore using httpx for async."""

    def __init__(
        self,
        host: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._url = host if host is not None else settings.MEILISEARCH_HOST
        self._api_key = api_key if api_key is not None else settings.MEILISEARCH_API_KEY
        self._timeout = timeout if timeout is not None else settings.MEILISEARCH_TIMEOUT
        self._transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def connect(self) -> None:
        if not self.client:
            headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
            self.client = httpx.AsyncClient(
                base_url=self._url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    async def _ensure_connected(self):
        if not self.client:
            await self.connect()

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request; transport failures become TransientTransportError."""
        await self._ensure_connected()
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.error("meilisearch_unreachable", operation=operation, error=str(e))
            raise TransientTransportError(operation, str(e)) from e

    @staticmethod
    def _raise_for_status(operation: str, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or resp.text or f"HTTP {resp.status_code}"
        code = body.get("code", "")
        logger.error(f"{operation}_failed", status_code=resp.status_code, code=code, error=message)
        raise SearchEngineApiError(operation, resp.status_code, message, code)

    async def health_check(self) -> bool:
        try:
            resp = await self._request("health_check", "GET", "/health")
            return resp.status_code == 200 and resp.json().get("status") == "available"
        except Exception as e:
            logger.error("meilisearch_health_check_failed", error=str(e))
            return False

    async def create_index(self, name: str, primary_key: str = "id") -> bool:
        # Check if exists
        resp = await self._request("create_index", "GET", f"/indexes/{name}")
        if resp.status_code == 200:
            return True

        payload = {"uid": name, "primaryKey": primary_key}
        resp = await self._request("create_index", "POST", "/indexes", json=payload)
        self._raise_for_status("create_index", resp)
        logger.info("created_meilisearch_index", index=name)
        return True

    async def delete_index(self, name: str) -> bool:
        resp = await self._request("delete_index", "DELETE", f"/indexes/{name}")
        if resp.status_code == 404:
            return False
        self._raise_for_status("delete_index", resp)
        logger.info("deleted_meilisearch_index", index=name)
        return True

    async def add_documents(self, index: str, documents: List[Dict[str, Any]]) -> Dict[str, Any]:
        resp = await self._request("add_documents", "POST", f"/indexes/{index}/documents", json=documents)
        self._raise_for_status("add_documents", resp)
        task = resp.json()
        logger.debug("indexed_documents", index=index, count=len(documents), task_uid=task.get("taskUid"))
        return task

    async def update_documents(self, index: str, documents: List[Dict[str, Any]]) -> Dict[str, Any]:
        resp = await self._request("update_documents", "PUT", f"/indexes/{index}/documents", json=documents)
        self._raise_for_status("update_documents", resp)
        task = resp.json()
        logger.debug("updated_documents", index=index, count=len(documents), task_uid=task.get("taskUid"))
        return task

    async def delete_document(self, index: str, doc_id: str) -> bool:
        resp = await self._request("delete_document", "DELETE", f"/indexes/{index}/documents/{doc_id}")
        if resp.status_code == 404:
            logger.debug("document_not_found", index=index, doc_id=doc_id)
            return False
        self._raise_for_status("delete_document", resp)
        logger.debug("deleted_document", index=index, doc_id=doc_id, task_uid=resp.json().get("taskUid"))
        return True

    async def delete_documents_by_filter(self, index: str, filter: str) -> Dict[str, Any]:
        resp = await self._request(
            "delete_documents_by_filter", "POST", f"/indexes/{index}/documents/delete", json={"filter": filter}
        )
        self._raise_for_status("delete_documents_by_filter", resp)
        task = resp.json()
        logger.debug("deleted_documents_by_filter", index=index, filter=filter, task_uid=task.get("taskUid"))
        return task

    async def get_document(self, index: str, doc_id: str) -> Optional[Dict[str, Any]]:
        resp = await self._request("get_document", "GET", f"/indexes/{index}/documents/{doc_id}")
        if resp.status_code == 404:
            return None
        self._raise_for_status("get_document", resp)
        return resp.json()

    async def search(self, index: str, query: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = {"q": query}
        if params:
            payload.update({k: v for k, v in params.items() if v is not None})

        resp = await self._request("search", "POST", f"/indexes/{index}/search", json=payload)
        self._raise_for_status("search", resp)
        return resp.json()

    async def get_task(self, task_uid: int) -> Dict[str, Any]:
        resp = await self._request("get_task", "GET", f"/tasks/{task_uid}")
        self._raise_for_status("get_task", resp)
        return resp.json()

    async def wait_for_task(self, task_uid: int, timeout_ms: int = 5000, interval_ms: int = 50) -> Dict[str, Any]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_ms / 1000
        while True:
            task = await self.get_task(task_uid)
            if task.get("status") in FINISHED_TASK_STATUSES:
                return task
            if loop.time() >= deadline:
                logger.warning("meilisearch_task_wait_timeout", task_uid=task_uid, status=task.get("status"))
                return task
            await asyncio.sleep(interval_ms / 1000)

    async def _update_setting(self, index: str, setting: str, attributes: List[str]) -> Dict[str, Any]:
        operation = f"update_{setting.replace('-', '_')}"
        resp = await self._request(operation, "PUT", f"/indexes/{index}/settings/{setting}", json=attributes)
        self._raise_for_status(operation, resp)
        return resp.json()

    async def update_filterable_attributes(self, index: str, attributes: List[str]) -> Dict[str, Any]:
        return await self._update_setting(index, "filterable-attributes", attributes)

    async def update_searchable_attributes(self, index: str, attributes: List[str]) -> Dict[str, Any]:
        return await self._update_setting(index, "searchable-attributes", attributes)

    async def update_sortable_attributes(self, index: str, attributes: List[str]) -> Dict[str, Any]:
        return await self._update_setting(index, "sortable-attributes", attributes)

    async def update_displayed_attributes(self, index: str, attributes: List[str]) -> Dict[str, Any]:
        return await self._update_setting(index, "displayed-attributes", attributes)
