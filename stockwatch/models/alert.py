from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String

from stockwatch.database.base import Base


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True)
    alert_type = Column(String, nullable=False)

    # No foreign key: the alert outlives a deleted item.
    item_id = Column(Integer)
    phone_number = Column(String, nullable=False)
    message = Column(String, nullable=False)

    delivered = Column(Boolean, nullable=False)
    failure_reason = Column(String)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("idx_alert_item", "item_id", "created_at"),
    )


__all__ = ["Alert"]
