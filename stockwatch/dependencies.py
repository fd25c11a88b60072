from fastapi import Request

from stockwatch.config import Settings
from stockwatch.core.security import authenticate_request
from stockwatch.services.inventory_store import InventoryStore
from stockwatch.services.notification_service import Notifier

_API_KEY_ALT_HEADER = "api-key"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_auth(request: Request):
    settings = get_app_settings(request)
    api_key = request.headers.get(settings.API_KEY_HEADER) or request.headers.get(
        _API_KEY_ALT_HEADER
    )
    return authenticate_request(api_key, settings)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


__all__ = ["get_app_settings", "get_db", "get_notifier", "get_store", "require_auth"]
