import logging

from stockwatch.core.records import InventoryRecord

logger = logging.getLogger(__name__)

SAMPLE_ITEMS = (
    InventoryRecord(
        name="Laptop Computer",
        description="Dell XPS 13 Laptop",
        category="Electronics",
        quantity=25,
        low_stock_threshold=5,
    ),
    InventoryRecord(
        name="Office Chair",
        description="Ergonomic office chair with lumbar support",
        category="Office Supplies",
        quantity=8,
        low_stock_threshold=3,
    ),
    InventoryRecord(
        name="Wireless Mouse",
        description="Logitech MX Master 3 Wireless Mouse",
        category="Electronics",
        quantity=2,
        low_stock_threshold=5,
    ),
    InventoryRecord(
        name="Coffee Beans",
        description="Premium Arabica Coffee Beans - 1kg",
        category="Food & Beverages",
        quantity=0,
        low_stock_threshold=10,
    ),
    InventoryRecord(
        name="Notebook",
        description="A4 Spiral Notebook - 200 pages",
        category="Office Supplies",
        quantity=50,
        low_stock_threshold=15,
    ),
)


def seed_sample_items(store) -> int:
    """Insert the sample catalogue into an empty store; returns items added."""
    if store.stats().total:
        logger.info("Seed skipped: inventory already has items.")
        return 0
    for record in SAMPLE_ITEMS:
        store.create(record)
    logger.info("Seeded %d sample inventory items.", len(SAMPLE_ITEMS))
    return len(SAMPLE_ITEMS)
