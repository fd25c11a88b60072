import argparse

from sqlalchemy import delete

from stockwatch.core.errors import StorageError
from stockwatch.core.logging import setup_logging
from stockwatch.database import Base, SessionLocal, engine, ensure_sqlite_schema
from stockwatch.models import InventoryItem, import_all_models
from stockwatch.services.account_service import create_user, user_exists
from stockwatch.services.inventory_store import InventoryStore
from stockwatch.services.seed_service import seed_sample_items

DEMO_EMAIL = "demo@inventory.com"
DEMO_PASSWORD = "demo123"


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample inventory data.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing inventory before seeding.",
    )
    parser.add_argument(
        "--no-demo-user",
        action="store_true",
        help="Skip creating the demo account.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema()

    if args.reset:
        db = SessionLocal()
        try:
            db.execute(delete(InventoryItem))
            db.commit()
        finally:
            db.close()

    added = seed_sample_items(InventoryStore(SessionLocal))
    print("Seeded {} inventory item(s).".format(added))

    if args.no_demo_user:
        return
    db = SessionLocal()
    try:
        if user_exists(db, DEMO_EMAIL):
            print("Demo account already exists.")
            return
        try:
            create_user(db, DEMO_EMAIL, DEMO_PASSWORD)
        except StorageError as exc:
            print("Demo account not created: {}".format(exc))
            return
        print("Demo account created: {}".format(DEMO_EMAIL))
    finally:
        db.close()


if __name__ == "__main__":
    main()
