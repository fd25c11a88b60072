from __future__ import annotations

import logging
from typing import Callable, Iterable, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockwatch.config import Settings, get_settings
from stockwatch.core.constants import STATUS_CRITICAL
from stockwatch.core.records import InventoryRecord
from stockwatch.core.stock_rules import is_escalation
from stockwatch.models.alert import Alert
from stockwatch.services.sms_service import send_sms

logger = logging.getLogger(__name__)

ALERT_LOW = "LOW"
ALERT_CRITICAL = "CRITICAL"
ALERT_DIGEST = "DIGEST"


class LowStockCheck(NamedTuple):
    items: int
    sent: bool
    message: Optional[str]


def build_single_alert(record: InventoryRecord) -> str:
    if record.quantity == 0:
        return "CRITICAL ALERT: {} is OUT OF STOCK!".format(record.name)
    return "LOW STOCK ALERT: {} only has {} items remaining.".format(
        record.name, record.quantity
    )


def build_digest(records: Iterable[InventoryRecord]) -> str:
    records = list(records)
    lines = ["INVENTORY ALERT: {} item(s) are running low:\n".format(len(records))]
    for record in records:
        lines.append("\u2022 {} ({} left)\n".format(record.name, record.quantity))
    return "".join(lines)


class LogSink:
    """Writes alerts to the log instead of sending them."""

    def send(self, message: str, phone: str) -> None:
        logger.info("Alert for %s:\n%s", phone, message)


class SmsSink:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings

    def send(self, message: str, phone: str) -> None:
        send_sms(message, phone, self.settings)


class Notifier:
    def __init__(
        self,
        sink,
        phone: str,
        *,
        session_factory: Optional[Callable[[], Session]] = None,
        transition_only: bool = True,
    ):
        self.sink = sink
        self.phone = phone
        self.transition_only = transition_only
        self._session_factory = session_factory

    def on_quantity_changed(
        self,
        before: Optional[InventoryRecord],
        after: InventoryRecord,
    ) -> Optional[str]:
        """Alert on ``after`` if it needs restocking.

        With ``transition_only`` set, only a change that made the status
        more severe triggers an alert.
        """
        if not after.needs_restock:
            return None
        if (
            self.transition_only
            and before is not None
            and not is_escalation(before.stock_status, after.stock_status)
        ):
            return None

        message = build_single_alert(after)
        alert_type = ALERT_CRITICAL if after.stock_status == STATUS_CRITICAL else ALERT_LOW
        self._deliver(alert_type, message, item_id=after.id)
        return message

    def notify_low_stock(self, records: Iterable[InventoryRecord]) -> Optional[str]:
        records = list(records)
        if not records:
            return None
        message = build_digest(records)
        self._deliver(ALERT_DIGEST, message)
        return message

    def _deliver(self, alert_type: str, message: str, *, item_id: Optional[int] = None) -> bool:
        delivered = False
        failure_reason = None
        if not self.phone:
            failure_reason = "No notification phone configured"
        else:
            try:
                self.sink.send(message, self.phone)
                delivered = True
            except (RuntimeError, ValueError) as exc:
                failure_reason = str(exc)

        if delivered:
            logger.info("%s alert sent to %s", alert_type, self.phone)
        else:
            logger.warning("%s alert not delivered: %s", alert_type, failure_reason)

        self._record(alert_type, message, item_id, delivered, failure_reason)
        return delivered

    def _record(self, alert_type, message, item_id, delivered, failure_reason) -> None:
        if self._session_factory is None:
            return
        db = self._session_factory()
        try:
            db.add(
                Alert(
                    alert_type=alert_type,
                    item_id=item_id,
                    phone_number=self.phone or "",
                    message=message,
                    delivered=delivered,
                    failure_reason=failure_reason,
                )
            )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Unable to record %s alert", alert_type)
        finally:
            db.close()


def build_notifier(
    settings: Optional[Settings] = None,
    *,
    session_factory: Optional[Callable[[], Session]] = None,
) -> Notifier:
    settings = settings or get_settings()
    sink = SmsSink(settings) if settings.SMS_ENABLED else LogSink()
    return Notifier(
        sink,
        settings.NOTIFICATION_PHONE.strip(),
        session_factory=session_factory,
        transition_only=settings.ALERT_ON_TRANSITION_ONLY,
    )


def run_low_stock_check(store, notifier: Notifier) -> LowStockCheck:
    records = store.list_low_stock()
    message = notifier.notify_low_stock(records)
    return LowStockCheck(items=len(records), sent=message is not None, message=message)


__all__ = [
    "ALERT_CRITICAL",
    "ALERT_DIGEST",
    "ALERT_LOW",
    "LogSink",
    "LowStockCheck",
    "Notifier",
    "SmsSink",
    "build_digest",
    "build_notifier",
    "build_single_alert",
    "run_low_stock_check",
]
