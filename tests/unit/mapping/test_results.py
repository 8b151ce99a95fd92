"""
Unit tests for result mapping.
"""

from ftsmeili.mapping.identity import encode_document_id
from ftsmeili.mapping.results import map_excerpts, map_get_document, map_hit, map_search_response


def _sources(document):
    return [excerpt.source for excerpt in document.excerpts]


class TestSearchResponse:
    def test_totals(self):
        response = map_search_response({"estimatedTotalHits": 12, "totalHits": 99, "processingTimeMs": 3})
        assert response.total == 12
        assert response.processing_time_ms == 3

    def test_total_falls_back_to_exact_count(self):
        assert map_search_response({"totalHits": 7}).total == 7

    def test_total_defaults_to_zero(self):
        response = map_search_response({})
        assert response.total == 0
        assert response.processing_time_ms == 0
        assert response.hits == []

    def test_hit_without_id_is_skipped(self):
        raw = {
            "hits": [
                {"id": "files_-_1", "title": "one"},
                {"title": "no id"},
                {"id": "files_-_3", "title": "three"},
            ]
        }

        response = map_search_response(raw)

        assert len(response.hits) == len(raw["hits"]) - 1
        assert [hit["id"] for hit in response.hits] == ["files_-_1", "files_-_3"]

    def test_malformed_shapes_are_skipped(self):
        assert map_search_response({"hits": "nope"}).hits == []
        assert map_search_response({"hits": [None, 3, "x", {"id": "a_-_b"}]}).hits == [{"id": "a_-_b"}]

        response = map_search_response({"hits": [{"id": None, "title": "null id"}, {"id": "a_-_b"}]})
        assert response.hits == [{"id": "a_-_b"}]


class TestHit:
    def test_identity_and_display_fields(self):
        hit = {
            "id": encode_document_id("files", "a b"),
            "hash": "h1",
            "lastModified": 1700000000,
            "source": "/alice/a b",
            "title": "A B",
            "owner": "alice",
            "users": ["bob"],
        }

        document = map_hit(hit, "carol")

        assert (document.provider_id, document.document_id) == ("files", "a b")
        assert document.hash == "h1"
        assert document.modified_time == 1700000000
        assert document.source == "/alice/a b"
        assert document.title == "A B"
        assert document.access.viewer_id == "carol"
        assert document.access.owner_id == ""
        assert document.access.users == []

    def test_legacy_id(self):
        document = map_hit({"id": "files_-_dir:file"}, "alice")
        assert (document.provider_id, document.document_id) == ("files", "dir:file")

    def test_content_and_title_excerpts(self):
        hit = {"id": "files_-_1", "_formatted": {"content": "some text", "title": "", "source": "ignored"}}

        document = map_hit(hit, "alice")

        assert _sources(document) == ["content"]
        assert document.excerpts[0].excerpt == "some text"

    def test_formatted_not_a_dict(self):
        assert map_hit({"id": "files_-_1", "_formatted": ["x"]}, "alice").excerpts == []

    def test_parts_excerpts_are_deduplicated(self):
        formatted = {
            "parts": {"body": "from object", "empty": ""},
            "parts.body": "from flat key",
            "parts.comments": "flat only",
        }

        excerpts = map_excerpts(formatted)

        assert [(e.source, e.excerpt) for e in excerpts] == [
            ("parts.body", "from object"),
            ("parts.comments", "flat only"),
        ]

    def test_non_string_part_excerpts_are_skipped(self):
        assert map_excerpts({"parts": {"body": 3}, "parts.x": None}) == []


class TestGetDocument:
    def test_full_access_is_rebuilt(self):
        raw = {
            "id": "files_-_42",
            "owner": "alice",
            "users": ["bob"],
            "groups": ["staff"],
            "circles": ["c1"],
            "links": ["l1"],
            "metatags": ["files"],
            "subtags": ["files_local"],
            "tags": ["t"],
            "hash": "abc",
            "lastModified": "1700000000",
            "source": "/alice/report",
            "title": "Report",
            "parts": {"comments": "ok"},
            "content": "body",
        }

        document = map_get_document(raw, "files", "42")

        assert document.access.owner_id == "alice"
        assert document.access.users == ["bob"]
        assert document.access.groups == ["staff"]
        assert document.access.circles == ["c1"]
        assert document.access.links == ["l1"]
        assert document.meta_tags == ["files"]
        assert document.sub_tags == ["files_local"]
        assert document.tags == ["t"]
        assert document.modified_time == 1700000000
        assert document.parts == {"comments": "ok"}
        assert document.content == "body"
        assert document.info == {}

    def test_missing_fields_default_to_empty(self):
        document = map_get_document({}, "files", "42")

        assert (document.provider_id, document.document_id) == ("files", "42")
        assert document.access.owner_id == ""
        assert document.access.users == []
        assert document.tags == []
        assert document.parts == {}
        assert document.modified_time == 0
        assert document.content == ""

    def test_unknown_fields_become_typed_info(self):
        raw = {
            "mimetype": "text/plain",
            "size": "2048",
            "rank": 3.7,
            "shared": True,
            "labels": ["x", "y"],
            "meta": {"k": "v"},
        }

        document = map_get_document(raw, "files", "42")

        assert document.info == {
            "mimetype": "text/plain",
            "size": 2048,
            "rank": 3,
            "shared": True,
            "labels": ["x", "y"],
            "meta": {"k": "v"},
        }
