import unittest

from stockwatch.config import Settings
from stockwatch.core.records import InventoryRecord
from stockwatch.database import Base, build_engine, build_session_factory
from stockwatch.models import Alert, import_all_models
from stockwatch.services.notification_service import (
    Notifier,
    SmsSink,
    build_notifier,
    build_digest,
    build_single_alert,
    run_low_stock_check,
)


class RecordingSink:
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send(self, message, phone):
        if self.error:
            raise self.error
        self.sent.append((message, phone))


class StubStore:
    def __init__(self, records):
        self.records = records

    def list_low_stock(self):
        return list(self.records)


def _record(name, quantity, threshold=10, item_id=1):
    return InventoryRecord(id=item_id, name=name, quantity=quantity, low_stock_threshold=threshold)


class MessageTest(unittest.TestCase):
    def test_single_alert_text(self):
        self.assertEqual(
            build_single_alert(_record("Coffee Beans", 0)),
            "CRITICAL ALERT: Coffee Beans is OUT OF STOCK!",
        )
        self.assertEqual(
            build_single_alert(_record("Wireless Mouse", 2, 5)),
            "LOW STOCK ALERT: Wireless Mouse only has 2 items remaining.",
        )

    def test_digest_text(self):
        digest = build_digest([_record("Coffee Beans", 0), _record("Wireless Mouse", 2, 5)])
        self.assertEqual(
            digest,
            "INVENTORY ALERT: 2 item(s) are running low:\n"
            "• Coffee Beans (0 left)\n"
            "• Wireless Mouse (2 left)\n",
        )


class NotifierTest(unittest.TestCase):
    def test_alerts_when_item_drops_into_low(self):
        sink = RecordingSink()
        notifier = Notifier(sink, "5551234567")
        message = notifier.on_quantity_changed(_record("Widget", 20), _record("Widget", 5))
        self.assertIn("LOW STOCK ALERT", message)
        self.assertEqual(sink.sent, [(message, "5551234567")])

    def test_no_alert_for_good_stock(self):
        sink = RecordingSink()
        notifier = Notifier(sink, "5551234567")
        self.assertIsNone(notifier.on_quantity_changed(_record("Widget", 5), _record("Widget", 30)))
        self.assertEqual(sink.sent, [])

    def test_transition_only_skips_repeat_low_alerts(self):
        sink = RecordingSink()
        notifier = Notifier(sink, "5551234567", transition_only=True)
        self.assertIsNone(notifier.on_quantity_changed(_record("Widget", 5), _record("Widget", 4)))

        every_change = Notifier(sink, "5551234567", transition_only=False)
        self.assertIsNotNone(every_change.on_quantity_changed(_record("Widget", 5), _record("Widget", 4)))
        self.assertEqual(len(sink.sent), 1)

    def test_low_to_critical_is_an_escalation(self):
        sink = RecordingSink()
        notifier = Notifier(sink, "5551234567")
        message = notifier.on_quantity_changed(_record("Widget", 3), _record("Widget", 0))
        self.assertIn("OUT OF STOCK", message)

    def test_delivery_failure_is_recorded_not_raised(self):
        import_all_models()
        engine = build_engine("sqlite:///:memory:")
        Base.metadata.create_all(bind=engine)
        session_factory = build_session_factory(engine)

        notifier = Notifier(
            RecordingSink(error=RuntimeError("SMS gateway error: HTTP 500")),
            "5551234567",
            session_factory=session_factory,
        )
        notifier.on_quantity_changed(_record("Widget", 20, item_id=9), _record("Widget", 0, item_id=9))

        db = session_factory()
        try:
            alert = db.query(Alert).one()
        finally:
            db.close()
        self.assertEqual(alert.alert_type, "CRITICAL")
        self.assertEqual(alert.item_id, 9)
        self.assertFalse(alert.delivered)
        self.assertIn("HTTP 500", alert.failure_reason)
        engine.dispose()

    def test_missing_phone_is_not_sent(self):
        sink = RecordingSink()
        notifier = Notifier(sink, "")
        notifier.notify_low_stock([_record("Widget", 1)])
        self.assertEqual(sink.sent, [])

    def test_run_low_stock_check(self):
        sink = RecordingSink()
        notifier = Notifier(sink, "5551234567")

        empty = run_low_stock_check(StubStore([]), notifier)
        self.assertEqual(empty.items, 0)
        self.assertFalse(empty.sent)
        self.assertEqual(sink.sent, [])

        check = run_low_stock_check(StubStore([_record("Gadget", 0), _record("Widget", 5)]), notifier)
        self.assertEqual(check.items, 2)
        self.assertTrue(check.sent)
        self.assertTrue(check.message.startswith("INVENTORY ALERT: 2 item(s)"))


class BuildNotifierTest(unittest.TestCase):
    def test_sms_sink_carries_app_settings(self):
        settings = Settings(SMS_ENABLED=True, NOTIFICATION_PHONE=" 5550001111 ")
        notifier = build_notifier(settings)
        self.assertIsInstance(notifier.sink, SmsSink)
        self.assertIs(notifier.sink.settings, settings)
        self.assertEqual(notifier.phone, "5550001111")

    def test_log_sink_when_sms_disabled(self):
        notifier = build_notifier(Settings(SMS_ENABLED=False))
        self.assertNotIsInstance(notifier.sink, SmsSink)


if __name__ == "__main__":
    unittest.main()
