"""
ftsmeili - Meilisearch platform for full-text search providers

This package translates a generic content-access model into Meilisearch:
- mapping: identity codec, index body, filter compiler, query builder, result mapper
- storage: Meilisearch transport (httpx)
- engine: index/search services and the platform orchestrator
- api: FastAPI endpoints for settings, indexing and search
- platform: Cross-cutting concerns (configuration, logging, errors)
"""

__version__ = "0.1.0"
