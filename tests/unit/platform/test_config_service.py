"""
Unit tests for the configuration service.
"""

import json

import pytest

from ftsmeili.platform.config import Settings
from ftsmeili.platform.config_service import (
    MEILISEARCH_API_KEY,
    MEILISEARCH_HOST,
    MEILISEARCH_INDEX,
    ConfigService,
    JsonFileConfigStore,
    MemoryConfigStore,
)
from ftsmeili.platform.exceptions import ConfigurationError


@pytest.fixture
def env_settings():
    return Settings(
        MEILISEARCH_HOST="http://env:7700", MEILISEARCH_INDEX="env_index", MEILISEARCH_API_KEY="", CONFIG_PATH=""
    )


def test_defaults_come_from_settings(env_settings):
    service = ConfigService(MemoryConfigStore(), settings=env_settings)

    assert service.get_config() == {
        MEILISEARCH_HOST: "http://env:7700",
        MEILISEARCH_INDEX: "env_index",
        MEILISEARCH_API_KEY: "",
    }


def test_stored_values_override_settings(env_settings):
    service = ConfigService(MemoryConfigStore({MEILISEARCH_INDEX: "stored"}), settings=env_settings)

    assert service.get_index_name() == "stored"
    assert service.get_host() == "http://env:7700"


def test_set_config_ignores_unknown_keys():
    store = MemoryConfigStore()
    service = ConfigService(store)

    service.set_config({MEILISEARCH_INDEX: "docs", "unknown": "x", MEILISEARCH_API_KEY: 123})

    assert store.load() == {MEILISEARCH_INDEX: "docs", MEILISEARCH_API_KEY: "123"}


def test_blank_values_raise_configuration_error():
    service = ConfigService(MemoryConfigStore({MEILISEARCH_HOST: "  ", MEILISEARCH_INDEX: ""}))

    with pytest.raises(ConfigurationError) as exc:
        service.get_host()
    assert exc.value.details == {"key": MEILISEARCH_HOST}

    with pytest.raises(ConfigurationError):
        service.get_index_name()


def test_values_are_trimmed():
    service = ConfigService(MemoryConfigStore({MEILISEARCH_HOST: " http://meili:7700 ", MEILISEARCH_INDEX: " docs\n"}))

    assert service.get_host() == "http://meili:7700"
    assert service.get_index_name() == "docs"


@pytest.mark.parametrize(
    "data,expected",
    [
        ({MEILISEARCH_HOST: "http://localhost:7700"}, True),
        ({MEILISEARCH_HOST: "https://search.example.com"}, True),
        ({MEILISEARCH_HOST: ""}, True),
        ({MEILISEARCH_HOST: "ftp://meili"}, False),
        ({MEILISEARCH_HOST: "meili.test"}, False),
        ({MEILISEARCH_INDEX: "next-cloud_1"}, True),
        ({MEILISEARCH_INDEX: "bad name"}, False),
        ({MEILISEARCH_INDEX: "bad/name"}, False),
        ({MEILISEARCH_API_KEY: "anything goes"}, True),
        ({MEILISEARCH_API_KEY: ["not", "scalar"]}, False),
        ({"unknown": "x"}, False),
        ({}, True),
    ],
)
def test_check_config(data, expected):
    assert ConfigService(MemoryConfigStore()).check_config(data) is expected


def test_json_file_store_round_trip(test_data_dir):
    path = f"{test_data_dir}/nested/config.json"
    service = ConfigService(JsonFileConfigStore(path))

    service.set_config({MEILISEARCH_INDEX: "docs"})

    assert json.loads(open(path, encoding="utf-8").read()) == {MEILISEARCH_INDEX: "docs"}
    assert ConfigService(JsonFileConfigStore(path)).get_index_name() == "docs"


def test_json_file_store_tolerates_bad_content(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonFileConfigStore(path).load() == {}

    path.write_text("[1, 2]", encoding="utf-8")
    assert JsonFileConfigStore(path).load() == {}

    assert JsonFileConfigStore(tmp_path / "missing.json").load() == {}
