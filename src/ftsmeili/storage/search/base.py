"""
Search Storage interface for ftsmeili (Full-Text Search).
"""
from typing import List, Dict, Any, Optional
from abc import ABC, abstractmethod


class SearchStore(ABC):
    """
    Abstract interface for full-text search engine operations.

    Document operations are scoped by index name. A missing document is not
    an error: `get_document` returns None and `delete_document` returns False.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connection."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if reachable."""
        pass

    @abstractmethod
    async def create_index(self, name: str, primary_key: str = "id") -> bool:
        """Create a new index."""
        pass

    @abstractmethod
    async def delete_index(self, name: str) -> bool:
        """Drop an index. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def add_documents(self, index: str, documents: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Add or replace documents. Returns the engine task."""
        pass

    @abstractmethod
    async def update_documents(self, index: str, documents: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Add or partially update documents. Returns the engine task."""
        pass

    @abstractmethod
    async def delete_document(self, index: str, doc_id: str) -> bool:
        """Delete one document by ID. Returns False when the engine reports not found."""
        pass

    @abstractmethod
    async def delete_documents_by_filter(self, index: str, filter: str) -> Dict[str, Any]:
        """Delete every document matching a filter expression."""
        pass

    @abstractmethod
    async def get_document(self, index: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one stored document, or None if it does not exist."""
        pass

    @abstractmethod
    async def search(self, index: str, query: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Search documents.

        Args:
            index: Index name
            query: Text query string
            params: Engine search parameters (filter, limit, offset, highlighting)

        Returns:
            The raw engine response.
        """
        pass

    @abstractmethod
    async def get_task(self, task_uid: int) -> Dict[str, Any]:
        """Fetch an asynchronous engine task."""
        pass

    @abstractmethod
    async def wait_for_task(self, task_uid: int, timeout_ms: int = 5000, interval_ms: int = 50) -> Dict[str, Any]:
        """Poll a task until it is finished or the timeout expires."""
        pass

    @abstractmethod
    async def update_filterable_attributes(self, index: str, attributes: List[str]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update_searchable_attributes(self, index: str, attributes: List[str]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update_sortable_attributes(self, index: str, attributes: List[str]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def update_displayed_attributes(self, index: str, attributes: List[str]) -> Dict[str, Any]:
        pass
