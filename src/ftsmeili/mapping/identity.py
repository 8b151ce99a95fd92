"""
Document identity codec.

Meilisearch document ids may only contain letters, digits, `-` and `_`.
A (provider_id, document_id) pair is mapped to such an id with one of two
schemes:

- legacy: ``provider:document`` with every ``:`` replaced by ``_-_``.
  Used when both halves only contain ``[A-Za-z0-9_:-]``, neither contains
  the separator, and the result decodes back to the same pair.
- escaped: ``h_<hex(provider)>_<hex(document)>``. Used for everything else.

Decoding auto-detects the scheme.
"""

import binascii
import re
from typing import List, Optional, Tuple

LEGACY_ID_SEPARATOR = "_-_"
ESCAPED_ID_PREFIX = "h_"

_LEGACY_SAFE = re.compile(r"^[A-Za-z0-9_:-]+$")
_HEX = re.compile(r"^[a-f0-9]+$")


def encode_document_id(provider_id: str, document_id: str) -> str:
    if requires_escaped_id(provider_id, document_id):
        return encode_escaped_document_id(provider_id, document_id)
    return encode_legacy_document_id(provider_id, document_id)


def decode_document_id(encoded_id: str) -> Tuple[str, str]:
    escaped = decode_escaped_document_id(encoded_id)
    if escaped is not None:
        return escaped
    return _decode_legacy_document_id(encoded_id)


def _decode_legacy_document_id(encoded_id: str) -> Tuple[str, str]:
    decoded = encoded_id.replace(LEGACY_ID_SEPARATOR, ":")
    provider_id, sep, document_id = decoded.partition(":")
    if not sep:
        return provider_id, ""
    return provider_id, document_id


def encode_legacy_document_id(provider_id: str, document_id: str) -> str:
    return f"{provider_id}:{document_id}".replace(":", LEGACY_ID_SEPARATOR)


def encode_escaped_document_id(provider_id: str, document_id: str) -> str:
    return ESCAPED_ID_PREFIX + _to_hex(provider_id) + "_" + _to_hex(document_id)


def requires_escaped_id(provider_id: str, document_id: str) -> bool:
    if LEGACY_ID_SEPARATOR in provider_id or LEGACY_ID_SEPARATOR in document_id:
        return True
    if not (_LEGACY_SAFE.match(provider_id) and _LEGACY_SAFE.match(document_id)):
        return True
    # A colon in the provider, or `_-` next to a colon, makes the legacy form ambiguous.
    legacy = encode_legacy_document_id(provider_id, document_id)
    return _decode_legacy_document_id(legacy) != (provider_id, document_id)


def decode_escaped_document_id(encoded_id: str) -> Optional[Tuple[str, str]]:
    """Return the decoded pair, or None when `encoded_id` is not an escaped id."""
    if not encoded_id.startswith(ESCAPED_ID_PREFIX):
        return None

    payload = encoded_id[len(ESCAPED_ID_PREFIX):]
    provider_hex, sep, document_hex = payload.partition("_")
    if not sep:
        return None
    if not _is_hex_data(provider_hex) or not _is_hex_data(document_hex):
        return None

    try:
        return _from_hex(provider_hex), _from_hex(document_hex)
    except UnicodeDecodeError:
        return None


def document_id_candidates(provider_id: str, document_id: str) -> List[str]:
    """
    Ids a pair may be stored under: the current encoding first, then the
    legacy one for documents indexed before escaped ids existed.
    """
    candidates = [
        encode_document_id(provider_id, document_id),
        encode_legacy_document_id(provider_id, document_id),
    ]
    return list(dict.fromkeys(candidates))


def _to_hex(value: str) -> str:
    return binascii.hexlify(value.encode("utf-8")).decode("ascii")


def _from_hex(value: str) -> str:
    if value == "":
        return ""
    return binascii.unhexlify(value).decode("utf-8")


def _is_hex_data(value: str) -> bool:
    if value == "":
        return True
    if len(value) % 2 != 0:
        return False
    return _HEX.match(value) is not None
