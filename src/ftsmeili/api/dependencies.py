from ftsmeili.engine.platform import MeilisearchPlatform
from ftsmeili.platform.config_service import ConfigService
from ftsmeili.platform.exceptions import ConfigurationError
from ftsmeili.platform.logging import get_logger

logger = get_logger(__name__)

# Singletons
_config_service: ConfigService | None = None
_platform: MeilisearchPlatform | None = None


def get_config_service() -> ConfigService:
    global _config_service
    if not _config_service:
        _config_service = ConfigService()
    return _config_service


def _get_platform_instance() -> MeilisearchPlatform:
    global _platform
    if not _platform:
        _platform = MeilisearchPlatform(get_config_service())
    return _platform


async def get_platform() -> MeilisearchPlatform:
    """Loaded platform; raises ConfigurationError while unconfigured."""
    platform = _get_platform_instance()
    if platform.store is None:
        await platform.load_platform()
    return platform


async def reload_platform() -> None:
    """Rebuild the store after a configuration change."""
    platform = _get_platform_instance()
    try:
        await platform.load_platform()
    except ConfigurationError as e:
        await platform.close()
        logger.warning("platform_not_configured", error=e.message)


async def init_resources() -> None:
    await reload_platform()


async def close_resources() -> None:
    global _platform
    if _platform:
        await _platform.close()
        _platform = None
