"""Request-scoped access to the components built by create_app()."""

from fastapi import Header, Request

from config import Settings
from errors import MissingClientIdError
from services.follow_store import FollowStore
from services.sportsdb import SportsDBClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> FollowStore:
    return request.app.state.follow_store


def get_sportsdb(request: Request) -> SportsDBClient:
    return request.app.state.sportsdb


def require_client_id(x_client_id: str | None = Header(None)) -> str:
    """Client identifier from the X-Client-Id header."""
    client_id = (x_client_id or "").strip()
    if not client_id:
        raise MissingClientIdError()
    return client_id
