"""
Router for platform settings.
"""

from typing import Annotated, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from ftsmeili.api import schemas
from ftsmeili.api.dependencies import get_config_service, reload_platform
from ftsmeili.platform.config_service import MEILISEARCH_API_KEY, ConfigService
from ftsmeili.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _masked(config: Dict[str, str]) -> Dict[str, str]:
    if config.get(MEILISEARCH_API_KEY):
        config[MEILISEARCH_API_KEY] = "********"
    return config


@router.get("/", response_model=Dict[str, str])
async def get_settings(
    config_service: Annotated[ConfigService, Depends(get_config_service)],
):
    """Current configuration, API key masked."""
    return _masked(config_service.get_config())


@router.put("/", response_model=Dict[str, str])
async def set_settings(
    update: schemas.SettingsUpdate,
    config_service: Annotated[ConfigService, Depends(get_config_service)],
):
    """Validate and store configuration, then reload the platform."""
    if not config_service.check_config(update.data):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Meilisearch configuration values")

    config_service.set_config(update.data)
    await reload_platform()
    return _masked(config_service.get_config())
