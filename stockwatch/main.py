import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from stockwatch.config import Settings, get_settings
from stockwatch.core.errors import StorageError
from stockwatch.core.logging import setup_logging
from stockwatch.core.scheduler import Scheduler
from stockwatch.core.validation import validation_error_from
from stockwatch.database import Base, build_session_factory, engine, ensure_sqlite_schema
from stockwatch.models import import_all_models
from stockwatch.routers import alerts_router, health_router, items_router
from stockwatch.services.inventory_store import InventoryStore
from stockwatch.services.notification_service import build_notifier, run_low_stock_check
from stockwatch.services.seed_service import seed_sample_items

logger = logging.getLogger(__name__)


def _startup_low_stock_check(store, notifier) -> None:
    try:
        check = run_low_stock_check(store, notifier)
    except StorageError:
        logger.exception("Startup low-stock check failed")
        return
    logger.info("Startup low-stock check: %d item(s) need restocking", check.items)


_REQUEST_PARTS = ("body", "path", "query", "header")


async def _request_validation_handler(_request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = tuple(error.get("loc") or ())
        if loc and loc[0] in _REQUEST_PARTS:
            loc = loc[1:]
        errors.append({**error, "loc": loc})
    invalid = validation_error_from(errors)
    return JSONResponse(status_code=422, content={"detail": invalid.to_detail()})


def create_app(settings: Optional[Settings] = None, *, bind: Optional[Engine] = None) -> FastAPI:
    settings = settings or get_settings()
    bind = bind if bind is not None else engine

    session_factory = build_session_factory(bind)
    store = InventoryStore(session_factory)
    notifier = build_notifier(settings, session_factory=session_factory)
    scheduler = Scheduler(
        timezone_mode=settings.SCHEDULER_TZ,
        poll_seconds=settings.SCHEDULER_POLL_SECONDS,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        import_all_models()
        Base.metadata.create_all(bind=bind)
        ensure_sqlite_schema(bind)

        if settings.SEED_SAMPLE_DATA:
            seed_sample_items(store)
        if settings.LOW_STOCK_CHECK_ON_STARTUP:
            _startup_low_stock_check(store, notifier)
        if settings.SCHEDULER_ENABLED:
            scheduler.add_daily_job(
                "low-stock-digest",
                settings.LOW_STOCK_DIGEST_TIME,
                lambda: run_low_stock_check(store, notifier),
            )
            scheduler.start()
        try:
            yield
        finally:
            scheduler.stop()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.store = store
    app.state.notifier = notifier
    app.state.scheduler = scheduler

    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.include_router(health_router)
    app.include_router(items_router)
    app.include_router(alerts_router)
    return app


setup_logging()
app = create_app()


__all__ = ["app", "create_app"]
