"""
Unit tests for the Meilisearch store, against a mocked HTTP transport.
"""

import json

import httpx
import pytest

from ftsmeili.mapping.query import build_search_query
from ftsmeili.models.document import DocumentAccess
from ftsmeili.models.search import SearchRequest
from ftsmeili.platform.exceptions import SearchEngineApiError, TransientTransportError
from ftsmeili.storage.search.meilisearch import MeiliSearchStore


class Recorder:
    """Collects requests and answers them from a route table."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "not found", "code": "not_found"})
        if callable(handler):
            return handler(request)
        status_code, body = handler
        return httpx.Response(status_code, json=body)


def make_store(routes, api_key="secret"):
    recorder = Recorder(routes)
    store = MeiliSearchStore(
        host="http://meili.test:7700",
        api_key=api_key,
        timeout=1.0,
        transport=httpx.MockTransport(recorder),
    )
    return store, recorder


async def test_api_key_is_sent_as_bearer_token():
    store, recorder = make_store({("GET", "/health"): (200, {"status": "available"})})

    assert await store.health_check() is True
    assert recorder.requests[0].headers["Authorization"] == "Bearer secret"
    await store.close()


async def test_no_authorization_without_api_key():
    store, recorder = make_store({("GET", "/health"): (200, {"status": "available"})}, api_key="")

    await store.health_check()

    assert "Authorization" not in recorder.requests[0].headers


async def test_health_check_false_when_unreachable():
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    store, _ = make_store({("GET", "/health"): fail})

    assert await store.health_check() is False


async def test_transport_failure_is_transient():
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    store, _ = make_store({("POST", "/indexes/docs/search"): fail})

    with pytest.raises(TransientTransportError) as exc:
        await store.search("docs", "query")
    assert exc.value.details["operation"] == "search"


async def test_api_error_carries_engine_code():
    store, _ = make_store(
        {
            ("POST", "/indexes/docs/documents"): (
                400,
                {"message": "Document identifier is invalid", "code": "invalid_document_id"},
            )
        }
    )

    with pytest.raises(SearchEngineApiError) as exc:
        await store.add_documents("docs", [{"id": "a b"}])
    assert exc.value.status_code == 400
    assert exc.value.code == "invalid_document_id"
    assert exc.value.message == "Document identifier is invalid"


async def test_api_error_without_json_body():
    store, _ = make_store({("GET", "/tasks/1"): lambda request: httpx.Response(500, text="oops")})

    with pytest.raises(SearchEngineApiError) as exc:
        await store.get_task(1)
    assert exc.value.status_code == 500
    assert exc.value.message == "oops"


async def test_missing_document_is_not_an_error():
    store, _ = make_store({})

    assert await store.get_document("docs", "files_-_1") is None
    assert await store.delete_document("docs", "files_-_1") is False
    assert await store.delete_index("docs") is False


async def test_get_and_delete_document():
    store, recorder = make_store(
        {
            ("GET", "/indexes/docs/documents/files_-_1"): (200, {"id": "files_-_1", "title": "t"}),
            ("DELETE", "/indexes/docs/documents/files_-_1"): (202, {"taskUid": 5}),
        }
    )

    assert await store.get_document("docs", "files_-_1") == {"id": "files_-_1", "title": "t"}
    assert await store.delete_document("docs", "files_-_1") is True
    assert [r.method for r in recorder.requests] == ["GET", "DELETE"]


async def test_add_and_update_documents_return_task():
    store, recorder = make_store(
        {
            ("POST", "/indexes/docs/documents"): (202, {"taskUid": 1, "status": "enqueued"}),
            ("PUT", "/indexes/docs/documents"): (202, {"taskUid": 2, "status": "enqueued"}),
        }
    )

    assert (await store.add_documents("docs", [{"id": "a"}]))["taskUid"] == 1
    assert (await store.update_documents("docs", [{"id": "a"}]))["taskUid"] == 2
    assert json.loads(recorder.requests[0].content) == [{"id": "a"}]


async def test_delete_documents_by_filter_payload():
    store, recorder = make_store({("POST", "/indexes/docs/documents/delete"): (202, {"taskUid": 3})})

    await store.delete_documents_by_filter("docs", "provider = 'files'")

    assert json.loads(recorder.requests[0].content) == {"filter": "provider = 'files'"}


async def test_search_payload_drops_only_unset_params():
    store, recorder = make_store(
        {("POST", "/indexes/docs/search"): (200, {"hits": [], "estimatedTotalHits": 0, "processingTimeMs": 1})}
    )

    result = await store.search(
        "docs", "report", {"filter": "provider = 'files'", "limit": 20, "sort": None, "highlightPreTag": ""}
    )

    assert result["processingTimeMs"] == 1
    assert json.loads(recorder.requests[0].content) == {
        "q": "report",
        "filter": "provider = 'files'",
        "limit": 20,
        "highlightPreTag": "",
    }


async def test_built_query_reaches_engine_with_empty_highlight_tags():
    store, recorder = make_store(
        {("POST", "/indexes/docs/search"): (200, {"hits": [], "estimatedTotalHits": 0, "processingTimeMs": 1})}
    )
    query = build_search_query(SearchRequest(search="x"), DocumentAccess(viewer_id="alice"), "files")

    await store.search("docs", query.query, query.params)

    sent = json.loads(recorder.requests[0].content)
    assert sent["q"] == "x"
    assert sent["highlightPreTag"] == ""
    assert sent["highlightPostTag"] == ""
    assert sent["attributesToHighlight"] == ["content", "title"]
    assert sent["showMatchesPosition"] is True


async def test_create_index_skips_existing():
    store, recorder = make_store({("GET", "/indexes/docs"): (200, {"uid": "docs"})})

    assert await store.create_index("docs") is True
    assert len(recorder.requests) == 1


async def test_create_index_posts_when_missing():
    store, recorder = make_store({("POST", "/indexes"): (202, {"taskUid": 1})})

    assert await store.create_index("docs", primary_key="id") is True
    assert json.loads(recorder.requests[-1].content) == {"uid": "docs", "primaryKey": "id"}


async def test_settings_updates():
    routes = {
        ("PUT", f"/indexes/docs/settings/{name}"): (202, {"taskUid": 1})
        for name in ("filterable-attributes", "searchable-attributes", "sortable-attributes", "displayed-attributes")
    }
    store, recorder = make_store(routes)

    await store.update_filterable_attributes("docs", ["provider"])
    await store.update_searchable_attributes("docs", ["title", "content"])
    await store.update_sortable_attributes("docs", ["lastModified"])
    await store.update_displayed_attributes("docs", ["*"])

    assert [json.loads(r.content) for r in recorder.requests] == [
        ["provider"],
        ["title", "content"],
        ["lastModified"],
        ["*"],
    ]


async def test_wait_for_task_polls_until_finished():
    statuses = iter(["enqueued", "processing", "succeeded"])

    def task(request):
        return httpx.Response(200, json={"uid": 7, "status": next(statuses)})

    store, recorder = make_store({("GET", "/tasks/7"): task})

    result = await store.wait_for_task(7, timeout_ms=5000, interval_ms=0)

    assert result["status"] == "succeeded"
    assert len(recorder.requests) == 3


async def test_wait_for_task_gives_up_after_timeout():
    store, _ = make_store({("GET", "/tasks/7"): (200, {"uid": 7, "status": "enqueued"})})

    result = await store.wait_for_task(7, timeout_ms=0, interval_ms=0)

    assert result["status"] == "enqueued"
