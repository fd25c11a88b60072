from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from stockwatch.dependencies import get_app_settings, get_store

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(store=Depends(get_store), settings=Depends(get_app_settings)):
    last_modified = store.last_modified
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "time": datetime.now(timezone.utc).isoformat(),
        "inventory_last_modified": last_modified.isoformat() if last_modified else None,
    }
