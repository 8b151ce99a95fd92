from .index_service import IndexService
from .platform import MeilisearchPlatform
from .runner import LoggingRunner, Runner, RunnerResult
from .search_service import SearchService

__all__ = ["IndexService", "MeilisearchPlatform", "LoggingRunner", "Runner", "RunnerResult", "SearchService"]
