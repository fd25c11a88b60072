import unittest

from stockwatch.core.errors import NegativeQuantityRejected
from stockwatch.core.records import UNSAVED_ID, InventoryRecord


class InventoryRecordTest(unittest.TestCase):
    def test_defaults(self):
        record = InventoryRecord()
        self.assertEqual(record.id, UNSAVED_ID)
        self.assertFalse(record.is_persisted)
        self.assertEqual(record.name, "")
        self.assertEqual(record.quantity, 0)
        self.assertEqual(record.low_stock_threshold, 10)
        self.assertEqual(record.stock_status, "Critical")

    def test_trims_text_and_clamps_counts(self):
        record = InventoryRecord(
            name="  Widget ",
            description=None,
            category=" Tools\n",
            quantity=-4,
            low_stock_threshold=-1,
            barcode=" 0042 ",
        )
        self.assertEqual(record.name, "Widget")
        self.assertEqual(record.description, "")
        self.assertEqual(record.category, "Tools")
        self.assertEqual(record.barcode, "0042")
        self.assertEqual(record.quantity, 0)
        self.assertEqual(record.low_stock_threshold, 0)

    def test_equality_uses_id_only(self):
        first = InventoryRecord(id=7, name="Widget", quantity=1)
        second = InventoryRecord(id=7, name="Gadget", quantity=99)
        other = InventoryRecord(id=8, name="Widget", quantity=1)
        self.assertEqual(first, second)
        self.assertNotEqual(first, other)
        self.assertEqual(len({first, second, other}), 2)

    def test_adjusted(self):
        record = InventoryRecord(id=3, name="Widget", quantity=5, low_stock_threshold=10)
        self.assertEqual(record.adjusted(7).quantity, 12)
        self.assertEqual(record.adjusted(-5).stock_status, "Critical")
        self.assertEqual(record.quantity, 5)

        with self.assertRaises(NegativeQuantityRejected) as ctx:
            record.adjusted(-6)
        self.assertEqual(ctx.exception.quantity, -1)


if __name__ == "__main__":
    unittest.main()
