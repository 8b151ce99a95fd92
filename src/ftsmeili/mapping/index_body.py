"""
Index body generation: canonical document -> flat Meilisearch document.
"""

import base64
import binascii
from typing import Any, Dict

from ftsmeili.mapping.identity import encode_document_id
from ftsmeili.models.document import ContentEncoding, IndexDocument
from ftsmeili.platform.exceptions import AccessIsEmptyError


def generate_index_body(document: IndexDocument) -> Dict[str, Any]:
    """
    Build the body Meilisearch indexes for `document`, without its `id`.

    Access fields are copied to top-level filterable attributes. Extension
    info fields are merged first so canonical fields win on key collision.
    """
    access = document.access
    if access is None:
        raise AccessIsEmptyError(document.document_id)

    body: Dict[str, Any] = {
        "owner": access.owner_id,
        "users": list(access.users),
        "groups": list(access.groups),
        "circles": list(access.circles),
        "links": list(access.links),
        "metatags": list(document.meta_tags),
        "subtags": list(document.sub_tags),
        "tags": list(document.tags),
        "hash": document.hash,
        "provider": document.provider_id,
        "lastModified": document.modified_time,
        "source": document.source,
        "title": document.title,
        "parts": dict(document.parts),
        "content": _decode_content(document),
    }

    return {**document.info, **body}


def generate_document(document: IndexDocument) -> Dict[str, Any]:
    """Index body with the engine identifier set."""
    body = generate_index_body(document)
    body["id"] = encode_document_id(document.provider_id, document.document_id)
    return body


def _decode_content(document: IndexDocument) -> str:
    content = document.content
    if content == "" or document.content_encoding != ContentEncoding.BASE64:
        return content

    # Never index binary garbage as text.
    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, ValueError):
        return ""
