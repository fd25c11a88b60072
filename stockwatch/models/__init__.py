import importlib

from stockwatch.models.alert import Alert
from stockwatch.models.inventory import InventoryItem
from stockwatch.models.user import User


def import_all_models() -> None:
    for module_name in (
        "stockwatch.models.alert",
        "stockwatch.models.inventory",
        "stockwatch.models.user",
    ):
        importlib.import_module(module_name)


__all__ = [
    "Alert",
    "InventoryItem",
    "User",
    "import_all_models",
]
