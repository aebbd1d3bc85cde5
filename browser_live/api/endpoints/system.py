"""System endpoints (health)"""

from typing import Any

from fastapi import APIRouter, Depends

from ... import __version__
from ...config import SERVER_NAME, BrowserLiveConfig
from ..dependencies import get_config

router = APIRouter()


@router.get("/health", tags=["System"], summary="Service health")
async def health(config: BrowserLiveConfig = Depends(get_config)) -> dict[str, Any]:
    """Report service identity and whether the Browser Use API key is configured"""
    return {
        "status": "healthy",
        "service": SERVER_NAME,
        "version": __version__,
        "api_key_configured": config.has_api_key,
    }
