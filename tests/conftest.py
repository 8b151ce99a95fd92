"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

sys.path.append(os.path.join(os.getcwd(), "src"))

# Settings are read once at import time; keep tests off the on-disk config.
os.environ.setdefault("APP_ENV", "test")
os.environ["CONFIG_PATH"] = ""

from ftsmeili.models.document import DocumentAccess, IndexDocument  # noqa: E402
from ftsmeili.platform.config_service import (  # noqa: E402
    MEILISEARCH_API_KEY,
    MEILISEARCH_HOST,
    MEILISEARCH_INDEX,
    ConfigService,
    MemoryConfigStore,
)


@pytest.fixture
def config_service() -> ConfigService:
    """A configured service backed by memory."""
    return ConfigService(
        MemoryConfigStore(
            {
                MEILISEARCH_HOST: "http://meili.test:7700",
                MEILISEARCH_INDEX: "nextcloud",
                MEILISEARCH_API_KEY: "secret",
            }
        )
    )


@pytest.fixture
def document() -> IndexDocument:
    return IndexDocument(
        provider_id="files",
        document_id="42",
        access=DocumentAccess(owner_id="alice", users=["bob"], groups=["staff"]),
        title="Quarterly report",
        content="Revenue grew in every region.",
        source="/alice/report.txt",
        modified_time=1700000000,
        meta_tags=["files"],
    )


@pytest.fixture
def test_data_dir(tmp_path) -> str:
    """Create a temporary data directory for tests."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return str(data_dir)
