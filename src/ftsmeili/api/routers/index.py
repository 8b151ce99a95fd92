"""
Router for index management and document indexing.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from ftsmeili.api import schemas
from ftsmeili.api.dependencies import get_platform
from ftsmeili.engine.platform import MeilisearchPlatform
from ftsmeili.models.document import Index, IndexDocument
from ftsmeili.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/initialize", status_code=status.HTTP_204_NO_CONTENT)
async def initialize_index(
    platform: Annotated[MeilisearchPlatform, Depends(get_platform)],
):
    """Create the index and configure its attributes."""
    await platform.initialize_index()


@router.post("/reset/{provider_id}", status_code=status.HTTP_204_NO_CONTENT)
async def reset_index(
    provider_id: str,
    platform: Annotated[MeilisearchPlatform, Depends(get_platform)],
):
    """Remove a provider's documents, or drop the whole index for `all`."""
    await platform.reset_index(provider_id)


@router.post("/documents", response_model=Index)
async def index_document(
    document: IndexDocument,
    platform: Annotated[MeilisearchPlatform, Depends(get_platform)],
):
    return await platform.index_document(document)


@router.delete("/documents/{provider_id}/{document_id:path}", response_model=schemas.DeleteResponse)
async def delete_document(
    provider_id: str,
    document_id: str,
    platform: Annotated[MeilisearchPlatform, Depends(get_platform)],
):
    await platform.delete_indexes([Index(provider_id=provider_id, document_id=document_id)])
    return schemas.DeleteResponse(provider_id=provider_id, document_id=document_id)
