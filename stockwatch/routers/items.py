from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from stockwatch.core.errors import NotFound, StorageError
from stockwatch.dependencies import get_notifier, get_store, require_auth
from stockwatch.schemas.item import InventoryStatsRead, ItemRead, QuantityAdjust
from stockwatch.services import item_commands
from stockwatch.services.inventory_store import InventoryStore

router = APIRouter(prefix="/items", tags=["Items"])

_STATUS_CODES = {
    item_commands.INVALID: 422,
    item_commands.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    item_commands.REJECTED: status.HTTP_409_CONFLICT,
    item_commands.FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _read(record) -> ItemRead:
    return ItemRead.model_validate(record)


def _unwrap(result: item_commands.CommandResult):
    if result.ok:
        return _read(result.record) if result.record is not None else None

    error = result.error
    if result.status == item_commands.INVALID:
        detail = error.to_detail()
    else:
        detail = str(error)
    raise HTTPException(status_code=_STATUS_CODES[result.status], detail=detail)


def _storage_failure(exc: StorageError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("", response_model=list[ItemRead])
def list_items(store: InventoryStore = Depends(get_store)):
    try:
        return [_read(record) for record in store.list()]
    except StorageError as exc:
        raise _storage_failure(exc) from exc


@router.get("/low-stock", response_model=list[ItemRead])
def list_low_stock_items(store: InventoryStore = Depends(get_store)):
    try:
        return [_read(record) for record in store.list_low_stock()]
    except StorageError as exc:
        raise _storage_failure(exc) from exc


@router.get("/stats", response_model=InventoryStatsRead)
def inventory_stats(store: InventoryStore = Depends(get_store)):
    try:
        stats = store.stats()
    except StorageError as exc:
        raise _storage_failure(exc) from exc
    return InventoryStatsRead(**stats._asdict())


@router.get("/{item_id}", response_model=ItemRead)
def get_item(item_id: int, store: InventoryStore = Depends(get_store)):
    try:
        return _read(store.get(item_id))
    except NotFound as exc:
        raise HTTPException(status_code=404, detail="Item not found.") from exc
    except StorageError as exc:
        raise _storage_failure(exc) from exc


@router.post("", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
def create_item(
    payload: dict[str, Any] = Body(...),
    store: InventoryStore = Depends(get_store),
    _auth=Depends(require_auth),
):
    return _unwrap(item_commands.create_item(store, payload))


@router.put("/{item_id}", response_model=ItemRead)
def update_item(
    item_id: int,
    payload: dict[str, Any] = Body(...),
    store: InventoryStore = Depends(get_store),
    _auth=Depends(require_auth),
):
    return _unwrap(item_commands.update_item(store, item_id, payload))


@router.patch("/{item_id}/quantity", response_model=ItemRead)
def set_item_quantity(
    item_id: int,
    payload: dict[str, Any] = Body(...),
    store: InventoryStore = Depends(get_store),
    notifier=Depends(get_notifier),
    _auth=Depends(require_auth),
):
    return _unwrap(
        item_commands.change_quantity(store, item_id, payload.get("quantity"), notifier=notifier)
    )


@router.post("/{item_id}/adjust", response_model=ItemRead)
def adjust_item_quantity(
    item_id: int,
    payload: QuantityAdjust,
    store: InventoryStore = Depends(get_store),
    notifier=Depends(get_notifier),
    _auth=Depends(require_auth),
):
    return _unwrap(
        item_commands.adjust_item_quantity(store, item_id, payload.delta, notifier=notifier)
    )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    store: InventoryStore = Depends(get_store),
    _auth=Depends(require_auth),
):
    _unwrap(item_commands.delete_item(store, item_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
