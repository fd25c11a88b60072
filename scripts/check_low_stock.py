import argparse
import logging

from stockwatch.config import get_settings
from stockwatch.core.logging import setup_logging
from stockwatch.database import Base, SessionLocal, engine, ensure_sqlite_schema
from stockwatch.models import import_all_models
from stockwatch.services.inventory_store import InventoryStore
from stockwatch.services.notification_service import LogSink, build_notifier, run_low_stock_check

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Send the low-stock digest once.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the digest instead of sending it.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema()

    notifier = build_notifier(get_settings(), session_factory=SessionLocal)
    if args.dry_run:
        notifier.sink = LogSink()

    check = run_low_stock_check(InventoryStore(SessionLocal), notifier)
    logger.info("Low-stock check finished: %d item(s), digest sent: %s", check.items, check.sent)


if __name__ == "__main__":
    main()
