"""
Document models exchanged with the host application.
"""

import hashlib
import time
from enum import IntEnum, IntFlag
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class ContentEncoding(IntEnum):
    NONE = 0
    BASE64 = 1


class IndexStatus(IntFlag):
    """Index state flags, combined the way the host tracks them."""

    OK = 1
    IGNORE = 2
    META = 4
    CONTENT = 8
    PARTS = 16
    FULL = 28  # META | CONTENT | PARTS
    REMOVE = 32
    DONE = 64
    FAILED = 128


class ErrorSeverity(IntEnum):
    SEV_1 = 1
    SEV_2 = 2
    SEV_3 = 3


class IndexErrorEntry(BaseModel):
    message: str
    exception: str = ""
    severity: ErrorSeverity = ErrorSeverity.SEV_3


class Index(BaseModel):
    """Per-document indexing state reported back to the host."""

    provider_id: str
    document_id: str
    owner_id: str = ""
    status: int = 0
    errors: List[IndexErrorEntry] = Field(default_factory=list)
    last_index: int = 0

    def is_status(self, status: int) -> bool:
        return (self.status & int(status)) != 0

    def set_status(self, status: int, reset: bool = False) -> None:
        if reset:
            self.status = int(status)
        else:
            self.status |= int(status)

    def add_error(self, message: str, exception: str = "", severity: ErrorSeverity = ErrorSeverity.SEV_3) -> None:
        self.errors.append(IndexErrorEntry(message=message, exception=exception, severity=severity))

    def set_last_index(self, timestamp: Optional[int] = None) -> None:
        self.last_index = int(time.time()) if timestamp is None else timestamp


class DocumentAccess(BaseModel):
    """
    Principals allowed to see a document.

    `viewer_id` is only meaningful at search time: it is the identity of the
    searching principal and is never written to the index.
    """

    owner_id: str = ""
    viewer_id: str = ""
    users: List[str] = Field(default_factory=list)
    groups: List[str] = Field(default_factory=list)
    circles: List[str] = Field(default_factory=list)
    links: List[str] = Field(default_factory=list)


class Excerpt(BaseModel):
    source: str
    excerpt: str


class IndexDocument(BaseModel):
    """Canonical document, as indexed and as returned by searches."""

    provider_id: str
    document_id: str
    access: Optional[DocumentAccess] = None
    index: Optional[Index] = None
    title: str = ""
    content: str = ""
    content_encoding: ContentEncoding = ContentEncoding.NONE
    source: str = ""
    modified_time: int = 0
    hash: str = ""
    tags: List[str] = Field(default_factory=list)
    meta_tags: List[str] = Field(default_factory=list)
    sub_tags: List[str] = Field(default_factory=list)
    parts: Dict[str, Any] = Field(default_factory=dict)
    # Extension fields: str, int, bool or array values keyed by name.
    info: Dict[str, Any] = Field(default_factory=dict)
    excerpts: List[Excerpt] = Field(default_factory=list)
    score: str = "0"

    @model_validator(mode="after")
    def _default_index(self) -> "IndexDocument":
        if self.index is None:
            owner_id = self.access.owner_id if self.access else ""
            self.index = Index(provider_id=self.provider_id, document_id=self.document_id, owner_id=owner_id)
        return self

    def init_hash(self) -> "IndexDocument":
        """Fingerprint the content; documents without content keep their hash."""
        if self.content:
            self.hash = hashlib.md5(self.content.encode("utf-8")).hexdigest()
        return self

    def set_info(self, key: str, value: Any) -> None:
        self.info[key] = value

    def add_excerpt(self, source: str, excerpt: str) -> None:
        self.excerpts.append(Excerpt(source=source, excerpt=excerpt))
