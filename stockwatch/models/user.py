from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from stockwatch.database.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column("user_id", Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True)
    password_hash = Column("password", String, nullable=False)
    password_salt = Column(String, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


__all__ = ["User"]
