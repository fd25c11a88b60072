from stockwatch.services.inventory_store import InventoryStats, InventoryStore
from stockwatch.services.item_commands import CommandResult
from stockwatch.services.notification_service import Notifier, build_notifier, run_low_stock_check
from stockwatch.services.seed_service import seed_sample_items

__all__ = [
    "CommandResult",
    "InventoryStats",
    "InventoryStore",
    "Notifier",
    "build_notifier",
    "run_low_stock_check",
    "seed_sample_items",
]
