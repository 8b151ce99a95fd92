from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ftsmeili.models.document import DocumentAccess
from ftsmeili.models.search import SearchRequest


class SettingsUpdate(BaseModel):
    data: Dict[str, Any] = Field(default_factory=dict, description="Configuration keys to store")


class SearchBody(BaseModel):
    request: SearchRequest = Field(default_factory=SearchRequest)
    access: Optional[DocumentAccess] = None


class DeleteResponse(BaseModel):
    provider_id: str
    document_id: str
    deleted: bool = True
