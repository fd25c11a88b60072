import unittest

from stockwatch.core.errors import NotFound, StorageError
from stockwatch.core.records import InventoryRecord
from stockwatch.database import Base, build_engine, build_session_factory
from stockwatch.models import import_all_models
from stockwatch.services import item_commands
from stockwatch.services.inventory_store import InventoryStore


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def on_quantity_changed(self, before, after):
        self.calls.append((before, after))


class BrokenStore:
    def delete(self, item_id):
        raise StorageError("database is locked")

    def get(self, item_id):
        raise StorageError("database is locked")


class ItemCommandsTest(unittest.TestCase):
    def setUp(self):
        import_all_models()
        self.engine = build_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=self.engine)
        self.store = InventoryStore(build_session_factory(self.engine))

    def tearDown(self):
        self.engine.dispose()

    def _payload(self, **overrides):
        data = {"name": "Widget", "category": "Tools", "quantity": 5, "low_stock_threshold": 10}
        data.update(overrides)
        return data

    def test_create_item(self):
        result = item_commands.create_item(self.store, self._payload())
        self.assertTrue(result.ok)
        self.assertEqual(result.record.stock_status, "Low")
        self.assertEqual(self.store.stats().total, 1)

    def test_create_item_invalid_never_reaches_store(self):
        result = item_commands.create_item(self.store, self._payload(name=""))
        self.assertEqual(result.status, item_commands.INVALID)
        self.assertEqual(result.error.field, "name")
        self.assertEqual(self.store.stats().total, 0)

    def test_update_unknown_item_is_not_found(self):
        result = item_commands.update_item(self.store, 404, self._payload())
        self.assertEqual(result.status, item_commands.NOT_FOUND)
        self.assertIsInstance(result.error, NotFound)

    def test_update_item(self):
        item_id = self.store.create(InventoryRecord(name="Widget", category="Tools", quantity=5))
        result = item_commands.update_item(self.store, item_id, self._payload(quantity=50))
        self.assertTrue(result.ok)
        self.assertEqual(result.record.quantity, 50)
        self.assertEqual(result.record.stock_status, "Good")

    def test_change_quantity_tells_notifier(self):
        item_id = self.store.create(InventoryRecord(name="Widget", category="Tools", quantity=20))
        notifier = RecordingNotifier()

        result = item_commands.change_quantity(self.store, item_id, "4", notifier=notifier)

        self.assertTrue(result.ok)
        self.assertEqual(self.store.get(item_id).quantity, 4)
        before, after = notifier.calls[0]
        self.assertEqual(before.quantity, 20)
        self.assertEqual(after.quantity, 4)

    def test_change_quantity_rejects_negative_before_store(self):
        item_id = self.store.create(InventoryRecord(name="Widget", quantity=20))
        notifier = RecordingNotifier()
        result = item_commands.change_quantity(self.store, item_id, -1, notifier=notifier)
        self.assertEqual(result.status, item_commands.INVALID)
        self.assertEqual(self.store.get(item_id).quantity, 20)
        self.assertEqual(notifier.calls, [])

    def test_change_quantity_unknown_item(self):
        result = item_commands.change_quantity(self.store, 404, 3)
        self.assertEqual(result.status, item_commands.NOT_FOUND)

    def test_adjust_quantity_below_zero_is_rejected(self):
        item_id = self.store.create(InventoryRecord(name="Widget", quantity=2))
        result = item_commands.adjust_item_quantity(self.store, item_id, -3)
        self.assertEqual(result.status, item_commands.REJECTED)
        self.assertEqual(self.store.get(item_id).quantity, 2)

        result = item_commands.adjust_item_quantity(self.store, item_id, -2)
        self.assertTrue(result.ok)
        self.assertEqual(result.record.stock_status, "Critical")

    def test_adjust_quantity_above_limit_is_invalid(self):
        item_id = self.store.create(InventoryRecord(name="Widget", quantity=5))
        notifier = RecordingNotifier()

        for delta in (999_995, 10**20):
            with self.subTest(delta=delta):
                result = item_commands.adjust_item_quantity(
                    self.store, item_id, delta, notifier=notifier
                )
                self.assertEqual(result.status, item_commands.INVALID)
                self.assertEqual(result.error.field, "quantity")
                self.assertEqual(result.error.reason, "Quantity is too large")

        self.assertEqual(self.store.get(item_id).quantity, 5)
        self.assertEqual(notifier.calls, [])

        result = item_commands.adjust_item_quantity(self.store, item_id, 999_994)
        self.assertTrue(result.ok)
        self.assertEqual(result.record.quantity, 999_999)

    def test_delete_item(self):
        item_id = self.store.create(InventoryRecord(name="Widget"))
        self.assertTrue(item_commands.delete_item(self.store, item_id).ok)
        self.assertEqual(
            item_commands.delete_item(self.store, item_id).status,
            item_commands.NOT_FOUND,
        )

    def test_storage_failures_become_failed_results(self):
        store = BrokenStore()
        self.assertEqual(item_commands.delete_item(store, 1).status, item_commands.FAILED)
        self.assertEqual(item_commands.change_quantity(store, 1, 3).status, item_commands.FAILED)


if __name__ == "__main__":
    unittest.main()
