"""FastAPI endpoints for settings, indexing and search."""
