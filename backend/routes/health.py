"""Health, readiness and deployment diagnostics routes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from config import DEMO_API_KEY, Settings
from dependencies import get_settings, get_sportsdb
from errors import UpstreamError
from services.sportsdb import SportsDBClient

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE = "sports-app-api"


@router.get("/")
async def root() -> dict:
    return {"ok": True, "service": SERVICE, "routes": True}


@router.get("/ready")
async def ready(settings: Settings = Depends(get_settings)) -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": SERVICE, "commit": settings.git_sha}


@router.get("/health")
async def health(
    settings: Settings = Depends(get_settings),
    sportsdb: SportsDBClient = Depends(get_sportsdb),
) -> dict:
    """Deep health check that verifies the sports-data API answers."""
    result = {"ok": True, "status": "ok", "service": SERVICE, "commit": settings.git_sha, "upstream": "not_tested"}

    try:
        await sportsdb.all_sports()
        result["upstream"] = "connected"
    except UpstreamError as e:
        logger.warning("Upstream health check failed: %s", e)
        result["upstream"] = "error"
        result["upstream_error"] = str(e)

    return result


@router.get("/__version")
async def version(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "version": settings.git_sha,
        "hasMeDebug": True,
        "time": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/__config")
async def config_info(settings: Settings = Depends(get_settings)) -> dict:
    """Upstream key diagnostics. Never echoes the key itself."""
    key = settings.api_key
    return {
        "hasEnvKey": bool(settings.sportsdb_api_key),
        "keyLooksLikeDemo123": key == DEMO_API_KEY,
        "keyLength": len(key),
        "baseHost": settings.sportsdb_base_url.split("://", 1)[-1].split("/", 1)[0],
        "usingV1": "/api/v1/" in settings.sportsdb_base_url + "/",
    }
