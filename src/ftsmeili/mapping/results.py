"""
Result mapping: raw Meilisearch responses -> canonical documents.

Raw responses are untrusted JSON. Malformed hits are skipped one by one;
a bad hit never fails the whole page.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ftsmeili.mapping.identity import decode_document_id
from ftsmeili.mapping.values import to_int
from ftsmeili.models.document import DocumentAccess, Excerpt, IndexDocument

KNOWN_FIELDS = frozenset(
    {
        "id",
        "owner",
        "users",
        "groups",
        "circles",
        "links",
        "provider",
        "metatags",
        "subtags",
        "tags",
        "hash",
        "lastModified",
        "source",
        "title",
        "parts",
        "content",
    }
)

HIGHLIGHTED_FIELDS = ("content", "title")


@dataclass
class SearchResponse:
    total: int = 0
    processing_time_ms: int = 0
    hits: List[Dict[str, Any]] = field(default_factory=list)


def map_search_response(raw: Dict[str, Any]) -> SearchResponse:
    total = raw.get("estimatedTotalHits")
    if total is None:
        total = raw.get("totalHits")

    hits = raw.get("hits")
    if not isinstance(hits, list):
        hits = []

    return SearchResponse(
        total=_int_or_zero(total),
        processing_time_ms=_int_or_zero(raw.get("processingTimeMs")),
        hits=[hit for hit in hits if isinstance(hit, dict) and hit.get("id") is not None],
    )


def map_hit(hit: Dict[str, Any], viewer_id: str) -> IndexDocument:
    """
    Map a search hit. Only identity and display fields are restored: the
    access record carries the viewer, not the stored grants.
    """
    provider_id, document_id = decode_document_id(str(hit["id"]))

    document = IndexDocument(
        provider_id=provider_id,
        document_id=document_id,
        access=DocumentAccess(viewer_id=viewer_id),
        hash=_str(hit.get("hash")),
        modified_time=_int_or_zero(hit.get("lastModified")),
        source=_str(hit.get("source")),
        title=_str(hit.get("title")),
        score="0",
    )

    formatted = hit.get("_formatted")
    if not isinstance(formatted, dict):
        formatted = {}
    document.excerpts = map_excerpts(formatted)

    return document


def map_excerpts(formatted: Dict[str, Any]) -> List[Excerpt]:
    excerpts: Dict[str, Excerpt] = {}

    def add(source: str, text: Any) -> None:
        if isinstance(text, str) and text != "" and source not in excerpts:
            excerpts[source] = Excerpt(source=source, excerpt=text)

    for name in HIGHLIGHTED_FIELDS:
        add(name, formatted.get(name))

    parts = formatted.get("parts")
    if isinstance(parts, dict):
        for part, text in parts.items():
            if isinstance(part, str):
                add(f"parts.{part}", text)

    for key, text in formatted.items():
        if isinstance(key, str) and key.startswith("parts."):
            add(key, text)

    return list(excerpts.values())


def map_get_document(raw: Dict[str, Any], provider_id: str, document_id: str) -> IndexDocument:
    """Rebuild a stored document, including its full access record."""
    access = DocumentAccess(
        owner_id=_str(raw.get("owner")),
        users=_str_list(raw.get("users")),
        groups=_str_list(raw.get("groups")),
        circles=_str_list(raw.get("circles")),
        links=_str_list(raw.get("links")),
    )

    parts = raw.get("parts")
    document = IndexDocument(
        provider_id=provider_id,
        document_id=document_id,
        access=access,
        meta_tags=_str_list(raw.get("metatags")),
        sub_tags=_str_list(raw.get("subtags")),
        tags=_str_list(raw.get("tags")),
        hash=_str(raw.get("hash")),
        modified_time=_int_or_zero(raw.get("lastModified")),
        source=_str(raw.get("source")),
        title=_str(raw.get("title")),
        parts=parts if isinstance(parts, dict) else {},
        content=_str(raw.get("content")),
    )

    for key, value in raw.items():
        if key in KNOWN_FIELDS or key.startswith("_"):
            continue
        document.set_info(key, _info_value(value))

    return document


def _info_value(value: Any) -> Any:
    if isinstance(value, (list, dict)):
        return value
    if isinstance(value, bool):
        return value
    number = to_int(value)
    if number is not None:
        return number
    return _str(value)


def _int_or_zero(value: Any) -> int:
    number = to_int(value)
    return 0 if number is None else number


def _str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return ""
    return str(value)


def _str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return [str(entry) for entry in value if isinstance(entry, (str, int, float)) and not isinstance(entry, bool)]
