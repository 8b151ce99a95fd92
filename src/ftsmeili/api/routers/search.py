"""
Router for search and document lookup.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from ftsmeili.api import schemas
from ftsmeili.api.dependencies import get_platform
from ftsmeili.engine.platform import MeilisearchPlatform
from ftsmeili.models.document import IndexDocument
from ftsmeili.models.search import SearchResult
from ftsmeili.platform.exceptions import DocumentNotFoundError

router = APIRouter()


@router.post("/search/{provider_id}", response_model=SearchResult)
async def search(
    provider_id: str,
    body: schemas.SearchBody,
    platform: Annotated[MeilisearchPlatform, Depends(get_platform)],
):
    """
    Search one provider's documents visible to the viewer in `body.access`.
    """
    result = SearchResult(request=body.request, provider_id=provider_id)
    await platform.search_request(result, body.access)
    return result


@router.get("/documents/{provider_id}/{document_id:path}", response_model=IndexDocument)
async def get_document(
    provider_id: str,
    document_id: str,
    platform: Annotated[MeilisearchPlatform, Depends(get_platform)],
):
    try:
        return await platform.get_document(provider_id, document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
