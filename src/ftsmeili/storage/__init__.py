"""ftsmeili Storage Layer - search engine transport (Meilisearch)."""

from .search import MeiliSearchStore, SearchStore

__all__ = ["SearchStore", "MeiliSearchStore"]
