from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from stockwatch.core.errors import StorageError
from stockwatch.dependencies import get_db, get_notifier, get_store, require_auth
from stockwatch.models.alert import Alert
from stockwatch.schemas.alert import AlertRead
from stockwatch.schemas.item import LowStockCheckRead
from stockwatch.services.notification_service import run_low_stock_check

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.post("/low-stock", response_model=LowStockCheckRead)
def run_low_stock_alerts(
    store=Depends(get_store),
    notifier=Depends(get_notifier),
    _auth=Depends(require_auth),
):
    try:
        check = run_low_stock_check(store, notifier)
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return LowStockCheckRead(**check._asdict())


@router.get("", response_model=list[AlertRead])
def recent_alerts(
    limit: int = Query(50, ge=1, le=500, description="Max alerts to return"),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    stmt = select(Alert).order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit)
    return [AlertRead.model_validate(alert) for alert in db.execute(stmt).scalars()]


__all__ = ["router"]
